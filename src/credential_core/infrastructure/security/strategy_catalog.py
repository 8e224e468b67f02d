"""Built-in strategy instances keyed by algorithm."""

from __future__ import annotations

from typing import Final

from credential_core.application.ports.encryption_strategy_port import EncryptionStrategyPort
from credential_core.domain.auth.encryption_algorithm import EncryptionAlgorithm
from credential_core.infrastructure.security.aes_strategy import Aes256Strategy
from credential_core.infrastructure.security.bcrypt_strategy import BcryptStrategy
from credential_core.infrastructure.security.digest_strategies import (
    IteratedSha1Strategy,
    md5_strategy,
    sha256_strategy,
    sha512_strategy,
)

_BUILTIN_STRATEGIES: Final[dict[EncryptionAlgorithm, EncryptionStrategyPort]] = {
    EncryptionAlgorithm.MD5: md5_strategy(),
    EncryptionAlgorithm.SHA1: IteratedSha1Strategy(),
    EncryptionAlgorithm.SHA256: sha256_strategy(),
    EncryptionAlgorithm.SHA512: sha512_strategy(),
    EncryptionAlgorithm.AES256: Aes256Strategy(),
    EncryptionAlgorithm.BCRYPT: BcryptStrategy(),
}


def builtin_strategy(algorithm: EncryptionAlgorithm) -> EncryptionStrategyPort | None:
    """Return the shared strategy for a built-in algorithm, None for none/custom."""

    return _BUILTIN_STRATEGIES.get(algorithm)
