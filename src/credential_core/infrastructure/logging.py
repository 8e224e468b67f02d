"""Logging configuration helpers for hosts embedding the credential core."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_PACKAGE_LOGGER = "credential_core"


def resolve_log_level(level: str) -> int:
    """Map a level name to its logging constant, defaulting to INFO."""

    normalized_level = level.strip().upper() if level.strip() else "INFO"
    resolved = logging.getLevelName(normalized_level)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, level: str, package_only: bool = False) -> None:
    """Configure log output for the credential core.

    With `package_only` the root logger is left to the host and only the
    `credential_core` logger level is adjusted.
    """

    resolved_level = resolve_log_level(level)
    if not package_only:
        logging.basicConfig(level=resolved_level, format=_LOG_FORMAT)
    logging.getLogger(_PACKAGE_LOGGER).setLevel(resolved_level)
