"""Bcrypt strategy; the hash carries its own salt and cost."""

from __future__ import annotations

import base64
import hashlib
from collections.abc import Sequence

import bcrypt

from credential_core.application.ports.encryption_strategy_port import EncodeParams

DEFAULT_BCRYPT_COST = 10


class BcryptStrategy:
    """Adaptive bcrypt hashing where `stretches` selects the cost factor.

    Each encode draws a new bcrypt salt, so verification must go through
    `matches` rather than comparing two encodes. Hosts using this strategy
    may leave `salt_field` unset to avoid salting twice.

    The joined tokens are reduced to a base64 SHA-256 digest (44 bytes) before
    hashing, so secrets and host salts of any length stay inside bcrypt's
    72-byte input limit without truncation.
    """

    supports_stretches = True
    supports_join_token = True
    requires_key = False

    def encode(self, tokens: Sequence[str], params: EncodeParams) -> str:
        cost = params.stretches or DEFAULT_BCRYPT_COST
        return bcrypt.hashpw(self._prehash(tokens, params), bcrypt.gensalt(rounds=cost)).decode(
            "utf-8"
        )

    def matches(self, encoded: str, tokens: Sequence[str], params: EncodeParams) -> bool:
        try:
            return bcrypt.checkpw(self._prehash(tokens, params), encoded.encode("utf-8"))
        except ValueError:
            return False

    def _prehash(self, tokens: Sequence[str], params: EncodeParams) -> bytes:
        joined = (params.join_token or "").join(tokens).encode("utf-8")
        return base64.b64encode(hashlib.sha256(joined).digest())
