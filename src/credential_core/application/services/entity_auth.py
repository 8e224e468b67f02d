"""Per-entity-type authentication surface returned by activation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from credential_core.application.config.auth_config import AuthConfig
from credential_core.application.ports.entity_store_port import EntityStorePort
from credential_core.application.ports.maybe_awaitable import resolve
from credential_core.application.services.authenticator import Authenticator
from credential_core.application.services.credential_lifecycle import CredentialLifecycle


class EntityAuth:
    """Authenticate, encrypt and run capability-module operations for one entity type.

    Operations contributed by capability modules are exposed as attributes;
    a later module shadows a same-named operation of an earlier one.
    """

    def __init__(
        self,
        *,
        entity_type: type,
        config: AuthConfig,
        store: EntityStorePort,
        authenticator: Authenticator,
        lifecycle: CredentialLifecycle,
    ) -> None:
        self._operations: dict[str, Any] = {}
        self.entity_type = entity_type
        self.config = config
        self.store = store
        self.authenticator = authenticator
        self.lifecycle = lifecycle

    async def authenticate(self, username: str, secret: str) -> Any | None:
        return await self.authenticator.authenticate(username, secret)

    def encrypt(self, *tokens: str) -> str:
        return self.authenticator.encrypt(*tokens)

    async def persist(self, entity: Any) -> Any:
        """Persist through the store, awaiting it when it is asynchronous."""

        return await resolve(self.store.persist(entity))

    def bind_operations(self, operations: Mapping[str, Any]) -> None:
        self._operations.update(operations)

    def __getattr__(self, name: str) -> Any:
        operations = self.__dict__.get("_operations", {})
        if name in operations:
            return operations[name]
        raise AttributeError(f"{type(self).__name__} has no operation {name!r}")
