"""Supported credential encryption algorithm identifiers."""

from __future__ import annotations

from enum import StrEnum


class EncryptionAlgorithm(StrEnum):
    """Algorithms selectable through `AuthConfig.encryption_algorithm`."""

    NONE = "none"
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"
    AES256 = "aes256"
    BCRYPT = "bcrypt"
    CUSTOM = "custom"
