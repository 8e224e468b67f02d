"""Reversible AES-256 strategy used strictly as a deterministic encoder."""

from __future__ import annotations

import base64
import hmac
from collections.abc import Sequence

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from credential_core.application.ports.encryption_strategy_port import EncodeParams
from credential_core.domain.auth.errors import ConfigurationError

AES256_KEY_BYTES = 32


def validate_aes256_key(key: bytes | None) -> bytes:
    """Return the key when usable for AES-256, else raise `ConfigurationError`."""

    if key is None:
        raise ConfigurationError("encryption_key is required for the aes256 algorithm")
    if len(key) != AES256_KEY_BYTES:
        raise ConfigurationError(
            f"aes256 encryption_key must be {AES256_KEY_BYTES} bytes, got {len(key)}"
        )
    return key


class Aes256Strategy:
    """AES-256-ECB with PKCS7 padding over the concatenated tokens, base64 encoded.

    ECB keeps the output deterministic so stored credentials can be compared
    by re-encoding; the key is supplied per call through `EncodeParams`.
    """

    supports_stretches = False
    supports_join_token = False
    requires_key = True

    def encode(self, tokens: Sequence[str], params: EncodeParams) -> str:
        key = validate_aes256_key(params.key)
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        plaintext = padder.update("".join(tokens).encode("utf-8")) + padder.finalize()
        encryptor = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
        ciphertext = encryptor.update(plaintext) + encryptor.finalize()
        return base64.b64encode(ciphertext).decode("ascii")

    def decode(self, encoded: str, params: EncodeParams) -> str:
        """Recover the concatenated tokens; available for migrations only."""

        key = validate_aes256_key(params.key)
        decryptor = Cipher(algorithms.AES(key), modes.ECB()).decryptor()
        padded = decryptor.update(base64.b64decode(encoded)) + decryptor.finalize()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        return (unpadder.update(padded) + unpadder.finalize()).decode("utf-8")

    def matches(self, encoded: str, tokens: Sequence[str], params: EncodeParams) -> bool:
        candidate = self.encode(tokens, params)
        return hmac.compare_digest(candidate.encode("ascii"), encoded.encode("utf-8"))
