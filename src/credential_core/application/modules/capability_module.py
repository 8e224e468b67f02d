"""Capability module contract and name registry."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

from credential_core.application.config.auth_config import AuthConfig
from credential_core.domain.auth.errors import ConfigurationError, UnknownCapabilityModuleError

if TYPE_CHECKING:
    from credential_core.application.services.entity_auth import EntityAuth

ModuleOperation = Callable[..., Any]


class CapabilityModule(Protocol):
    """Named unit of behavior composed into an entity type at activation."""

    name: str

    def apply(self, config: AuthConfig) -> None:
        """Add settings, override defaults and register hooks on the config."""

    def operations(self, auth: EntityAuth) -> Mapping[str, ModuleOperation]:
        """Return operations exposed on the activated entity-type surface."""


class CapabilityModuleRegistry:
    """Resolve module names to module values, failing fast on unknown names."""

    def __init__(self, modules: Iterable[CapabilityModule] = ()) -> None:
        self._modules: dict[str, CapabilityModule] = {}
        for module in modules:
            self.register(module)

    def register(self, module: CapabilityModule) -> None:
        if module.name in self._modules:
            raise ConfigurationError(f"capability module already registered: {module.name}")
        self._modules[module.name] = module

    def resolve(self, name: str) -> CapabilityModule:
        try:
            return self._modules[name]
        except KeyError as exc:
            raise UnknownCapabilityModuleError(name=name) from exc

    def names(self) -> list[str]:
        return sorted(self._modules)


def default_registry() -> CapabilityModuleRegistry:
    """Return a registry holding the built-in capability modules."""

    from credential_core.application.modules.remember_me import RememberMeModule
    from credential_core.application.modules.user_activation import UserActivationModule

    return CapabilityModuleRegistry([UserActivationModule(), RememberMeModule()])
