"""Fixed-digest encoding strategies built on hashlib."""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Sequence

from credential_core.application.ports.encryption_strategy_port import EncodeParams


class DigestStrategy:
    """Join tokens, then hex-digest the result once per stretch round."""

    supports_stretches = True
    supports_join_token = True
    requires_key = False

    def __init__(
        self,
        *,
        hash_name: str,
        default_stretches: int,
        default_join_token: str = "",
    ) -> None:
        self.hash_name = hash_name
        self.default_stretches = default_stretches
        self.default_join_token = default_join_token

    def encode(self, tokens: Sequence[str], params: EncodeParams) -> str:
        digest = self._join_token(params).join(tokens)
        for _ in range(self._stretches(params)):
            digest = self._hexdigest(digest)
        return digest

    def matches(self, encoded: str, tokens: Sequence[str], params: EncodeParams) -> bool:
        candidate = self.encode(tokens, params)
        return hmac.compare_digest(candidate.encode("utf-8"), encoded.encode("utf-8"))

    def _stretches(self, params: EncodeParams) -> int:
        return params.stretches or self.default_stretches

    def _join_token(self, params: EncodeParams) -> str:
        if params.join_token is None:
            return self.default_join_token
        return params.join_token

    def _hexdigest(self, value: str) -> str:
        return hashlib.new(self.hash_name, value.encode("utf-8")).hexdigest()


class IteratedSha1Strategy(DigestStrategy):
    """SHA-1 variant that re-mixes the input tokens into every round."""

    def __init__(self) -> None:
        super().__init__(hash_name="sha1", default_stretches=10, default_join_token="--")

    def encode(self, tokens: Sequence[str], params: EncodeParams) -> str:
        join_token = self._join_token(params)
        parts: list[str] = list(tokens)
        digest = ""
        for _ in range(self._stretches(params)):
            digest = self._hexdigest(join_token.join([*parts, *tokens]))
            parts = [digest]
        return digest


def md5_strategy() -> DigestStrategy:
    return DigestStrategy(hash_name="md5", default_stretches=1)


def sha256_strategy() -> DigestStrategy:
    return DigestStrategy(hash_name="sha256", default_stretches=20)


def sha512_strategy() -> DigestStrategy:
    return DigestStrategy(hash_name="sha512", default_stretches=20)
