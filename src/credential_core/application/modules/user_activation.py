"""Capability module requiring entities to activate before they can log in."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any

from credential_core.application.config.auth_config import AuthConfig
from credential_core.application.config.sealable import Sealable
from credential_core.application.modules.capability_module import ModuleOperation
from credential_core.application.ports.maybe_awaitable import resolve
from credential_core.application.ports.notifier_port import NotifierPort
from credential_core.domain.auth.activation_state import ActivationState
from credential_core.domain.auth.entity_fields import FieldAccessor
from credential_core.domain.auth.errors import ConfigurationError
from credential_core.domain.auth.random_codes import generate_random_code

if TYPE_CHECKING:
    from credential_core.application.services.entity_auth import EntityAuth

USER_ACTIVATION = "user_activation"
logger = logging.getLogger(__name__)


@dataclass
class UserActivationSettings(Sealable):
    """Options added to the config by the user-activation module."""

    activation_state_field: str = "activation_state"
    activation_token_field: str = "activation_token"
    notifier: NotifierPort | None = None
    activation_needed_template: str | None = "activation_needed_email"
    activation_success_template: str | None = "activation_success_email"
    prevent_non_active_login: bool = True

    @property
    def state(self) -> FieldAccessor:
        return FieldAccessor(self.activation_state_field)

    @property
    def token(self) -> FieldAccessor:
        return FieldAccessor(self.activation_token_field)

    def notify(self, template_key: str | None, entity: Any) -> object | None:
        """Hand one template to the notifier; a None template disables it."""

        if template_key is None or self.notifier is None:
            return None
        return self.notifier.notify(template_key, entity)


class UserActivationModule:
    """New entities start pending with a token and must be activated to log in."""

    name = USER_ACTIVATION

    def apply(self, config: AuthConfig) -> None:
        config.module_settings[self.name] = UserActivationSettings()
        config.before_persist(_setup_activation)
        config.after_persist(_send_activation_needed)
        config.before_authenticate(_prevent_non_active_login)
        config.after_config(_validate_notifier)

    def operations(self, auth: EntityAuth) -> Mapping[str, ModuleOperation]:
        return {
            "activate_account": partial(activate_account, auth),
            "load_from_activation_token": partial(load_from_activation_token, auth),
        }


async def activate_account(auth: EntityAuth, entity: Any) -> Any:
    """Mark the entity active, persist it and send the success notification."""

    settings: UserActivationSettings = auth.config.settings_for(USER_ACTIVATION)
    settings.token.set(entity, None)
    settings.state.set(entity, ActivationState.ACTIVE.value)
    await auth.persist(entity)
    settings.notify(settings.activation_success_template, entity)
    logger.info("account_activated entity_type=%s", auth.entity_type.__name__)
    return entity


async def load_from_activation_token(auth: EntityAuth, token: str) -> Any | None:
    """Return the entity holding a pending activation token, or None."""

    if not token:
        return None
    settings: UserActivationSettings = auth.config.settings_for(USER_ACTIVATION)
    return await resolve(auth.store.find_one_by(field=settings.activation_token_field, value=token))


def _setup_activation(entity: Any, config: AuthConfig, is_new: bool) -> None:
    if not is_new:
        return
    settings: UserActivationSettings = config.settings_for(USER_ACTIVATION)
    settings.state.set(entity, ActivationState.PENDING.value)
    settings.token.set(entity, generate_random_code())


def _send_activation_needed(entity: Any, config: AuthConfig, is_new: bool) -> None:
    if not is_new:
        return
    settings: UserActivationSettings = config.settings_for(USER_ACTIVATION)
    settings.notify(settings.activation_needed_template, entity)


def _prevent_non_active_login(entity: Any, config: AuthConfig) -> bool:
    settings: UserActivationSettings = config.settings_for(USER_ACTIVATION)
    if not settings.prevent_non_active_login:
        return True
    return settings.state.get(entity) == ActivationState.ACTIVE.value


def _validate_notifier(config: AuthConfig) -> None:
    settings: UserActivationSettings = config.settings_for(USER_ACTIVATION)
    templates = (settings.activation_needed_template, settings.activation_success_template)
    if settings.notifier is None and any(template is not None for template in templates):
        raise ConfigurationError(
            "user_activation requires a notifier unless both templates are disabled"
        )
