"""Errors raised while building or using an authentication configuration."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when an entity-type authentication configuration is invalid."""


class UnknownCapabilityModuleError(ConfigurationError):
    """Raised when activation names a capability module nobody registered."""

    def __init__(self, *, name: str) -> None:
        super().__init__(f"unknown capability module: {name}")
        self.name = name


class SealedConfigError(ConfigurationError):
    """Raised when a sealed configuration receives an attribute assignment."""

    def __init__(self, *, attribute: str) -> None:
        super().__init__(f"configuration is sealed; cannot set {attribute}")
        self.attribute = attribute
