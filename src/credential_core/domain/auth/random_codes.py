"""Random value helpers for salts and one-time tokens."""

from __future__ import annotations

import secrets

_SALT_BYTES = 16
_CODE_BYTES = 20


def generate_salt() -> str:
    """Return a fresh random salt as hex text."""

    return secrets.token_hex(_SALT_BYTES)


def generate_random_code() -> str:
    """Return a random 40-character hex code for activation or remember-me tokens."""

    return secrets.token_hex(_CODE_BYTES)
