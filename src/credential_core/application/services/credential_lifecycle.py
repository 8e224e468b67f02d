"""Persist-time credential derivation and plaintext clearing."""

from __future__ import annotations

import logging
from collections.abc import Callable

from credential_core.application.config.auth_config import AuthConfig
from credential_core.application.services.authenticator import Authenticator
from credential_core.domain.auth.entity_fields import EntityFields
from credential_core.domain.auth.errors import ConfigurationError
from credential_core.domain.auth.random_codes import generate_salt

logger = logging.getLogger(__name__)


class CredentialLifecycle:
    """Hooks bound to the entity store around each persist."""

    def __init__(
        self,
        *,
        config: AuthConfig,
        authenticator: Authenticator,
        salt_factory: Callable[[], str] = generate_salt,
    ) -> None:
        if config.fields is None:
            raise ConfigurationError("credential lifecycle requires a sealed configuration")
        self._config = config
        self._fields: EntityFields = config.fields
        self._authenticator = authenticator
        self._salt_factory = salt_factory

    def before_persist(self, entity: object, *, is_new: bool) -> None:
        """Derive and store the encoded credential when new or a plaintext is set.

        The salt and encoded credential are computed first and assigned together,
        so an encoding error leaves the entity's stored fields untouched.
        """

        if is_new or self._fields.password.is_populated(entity):
            self.encrypt_password(entity)
        for hook in self._config.before_persist_hooks:
            hook(entity, self._config, is_new)

    def after_persist(self, entity: object, *, is_new: bool) -> None:
        """Run module hooks, then drop the plaintext once it has been stored."""

        for hook in self._config.after_persist_hooks:
            hook(entity, self._config, is_new)
        if self._fields.password.is_populated(entity):
            self.clear_plaintext_password(entity)

    def encrypt_password(self, entity: object) -> None:
        plaintext = self._fields.password.get(entity) or ""
        salt = self._salt_factory() if self._fields.salt is not None else None
        encoded = self._authenticator.encrypt(
            *self._authenticator.credential_tokens(plaintext, salt)
        )

        if self._fields.salt is not None:
            self._fields.salt.set(entity, salt)
        self._fields.encoded_credential.set(entity, encoded)
        logger.debug("credential_encoded field=%s", self._fields.encoded_credential.name)

    def clear_plaintext_password(self, entity: object) -> None:
        self._fields.password.set(entity, None)
