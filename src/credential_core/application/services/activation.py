"""One-time activation of authentication for a host entity type."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from credential_core.application.config.auth_config import AuthConfig
from credential_core.application.modules.capability_module import (
    CapabilityModuleRegistry,
    default_registry,
)
from credential_core.application.ports.entity_store_port import EntityStorePort
from credential_core.application.services.authenticator import Authenticator
from credential_core.application.services.credential_lifecycle import CredentialLifecycle
from credential_core.application.services.entity_auth import EntityAuth
from credential_core.config.settings import Settings
from credential_core.domain.auth.encryption_algorithm import EncryptionAlgorithm

ConfigureBlock = Callable[[AuthConfig], None]
logger = logging.getLogger(__name__)


def activate(
    entity_type: type,
    *,
    store: EntityStorePort,
    modules: Sequence[str] = (),
    configure: ConfigureBlock | None = None,
    settings: Settings | None = None,
    registry: CapabilityModuleRegistry | None = None,
) -> EntityAuth:
    """Build, configure and seal the authentication config for `entity_type`.

    Modules apply in list order before `configure` runs, so the host block can
    override anything a module set. Post-config hooks run last, then the config
    is sealed and the persist bindings are attached to `store`. Activating the
    same store twice attaches the bindings twice and is not supported.
    """

    entity_name = getattr(entity_type, "__name__", str(entity_type))
    resolved_registry = registry if registry is not None else default_registry()
    resolved_modules = [resolved_registry.resolve(name) for name in modules]

    config = AuthConfig()
    if settings is not None:
        config.apply_settings(settings)
    for module in resolved_modules:
        config.active_modules.append(module.name)
        module.apply(config)

    if configure is not None:
        configure(config)

    for hook in list(config.post_config_hooks):
        hook(config)
    config.seal()

    if config.encryption_algorithm is EncryptionAlgorithm.NONE:
        logger.warning(
            "credential_plaintext_storage_enabled entity_type=%s algorithm=none",
            entity_name,
        )

    authenticator = Authenticator(config=config, store=store, entity_name=entity_name)
    lifecycle = CredentialLifecycle(config=config, authenticator=authenticator)
    store.add_before_persist(lifecycle.before_persist)
    store.add_after_persist(lifecycle.after_persist)

    auth = EntityAuth(
        entity_type=entity_type,
        config=config,
        store=store,
        authenticator=authenticator,
        lifecycle=lifecycle,
    )
    for module in resolved_modules:
        auth.bind_operations(module.operations(auth))

    logger.info(
        "credential_activation_completed entity_type=%s algorithm=%s modules=%s",
        entity_name,
        config.encryption_algorithm.value,
        ",".join(config.active_modules) or "-",
    )
    return auth
