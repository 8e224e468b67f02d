"""Entity-type scoped credential encoding and verification."""

from __future__ import annotations

import hmac
import logging
from collections.abc import Sequence
from typing import Any

from credential_core.application.config.auth_config import AuthConfig
from credential_core.application.ports.encryption_strategy_port import (
    EncodeParams,
    EncryptionStrategyPort,
)
from credential_core.application.ports.entity_store_port import EntityStorePort
from credential_core.application.ports.maybe_awaitable import resolve
from credential_core.domain.auth.entity_fields import EntityFields
from credential_core.domain.auth.errors import ConfigurationError

logger = logging.getLogger(__name__)

_PLACEHOLDER_SALT = "0" * 32


class Authenticator:
    """Encode secrets and authenticate entities against one sealed config."""

    def __init__(self, *, config: AuthConfig, store: EntityStorePort, entity_name: str) -> None:
        if config.fields is None:
            raise ConfigurationError("authenticator requires a sealed configuration")
        self._config = config
        self._fields: EntityFields = config.fields
        self._store = store
        self._entity_name = entity_name
        self._placeholder_credential: str | None = None

    def encrypt(self, *tokens: str) -> str:
        """Encode tokens with the configured strategy.

        With algorithm `none` the first token is returned unchanged.
        """

        strategy = self._config.encryption_strategy
        if strategy is None:
            return tokens[0]
        return strategy.encode(tokens, self._encode_params(strategy))

    async def authenticate(self, username: str, secret: str) -> Any | None:
        """Return the matching entity, or None for any kind of failure."""

        entity = await resolve(
            self._store.find_one_by(field=self._fields.username.name, value=username)
        )
        if entity is None:
            self._match_placeholder(secret)
            self._log_failure("unknown_username")
            return None

        salt = self._fields.salt.get(entity) if self._fields.salt is not None else None
        tokens = self.credential_tokens(secret, salt)

        if not all(hook(entity, self._config) for hook in self._config.pre_authenticate_hooks):
            self._credentials_match(entity, tokens)
            self._log_failure("hook_veto")
            return None

        if not self._credentials_match(entity, tokens):
            self._log_failure("credential_mismatch")
            return None

        logger.info("authenticate_succeeded entity_type=%s", self._entity_name)
        return entity

    def _credentials_match(self, entity: object, tokens: Sequence[str]) -> bool:
        stored = self._fields.encoded_credential.get(entity)
        if stored is None:
            return False

        strategy = self._config.encryption_strategy
        if strategy is None:
            return _constant_time_equals(str(stored), tokens[0])
        return strategy.matches(str(stored), tokens, self._encode_params(strategy))

    def _match_placeholder(self, secret: str) -> None:
        """Spend one verification on a throwaway credential for unknown usernames."""

        salt = _PLACEHOLDER_SALT if self._fields.salt is not None else None
        tokens = self.credential_tokens(secret, salt)
        strategy = self._config.encryption_strategy
        if strategy is None:
            _constant_time_equals(_PLACEHOLDER_SALT, tokens[0])
            return

        params = self._encode_params(strategy)
        if self._placeholder_credential is None:
            self._placeholder_credential = strategy.encode(
                self.credential_tokens("", salt), params
            )
        strategy.matches(self._placeholder_credential, tokens, params)

    def _encode_params(self, strategy: EncryptionStrategyPort) -> EncodeParams:
        config = self._config
        key: bytes | None = None
        if strategy.requires_key:
            key = config.encryption_key_bytes
            if key is None:
                raise ConfigurationError(
                    f"encryption_key is required for the {config.encryption_algorithm} algorithm"
                )
        return EncodeParams(
            stretches=config.stretches if strategy.supports_stretches else None,
            join_token=(
                config.salt_join_token
                if strategy.supports_join_token and config.salt_join_token
                else None
            ),
            key=key,
        )

    def credential_tokens(self, secret: str, salt: str | None) -> tuple[str, ...]:
        """Return the ordered tokens encoded for one secret and optional salt."""

        if salt:
            return (secret, salt)
        return (secret,)

    def _log_failure(self, reason: str) -> None:
        logger.info("authenticate_failed entity_type=%s reason=%s", self._entity_name, reason)


def _constant_time_equals(left: str, right: str) -> bool:
    return hmac.compare_digest(left.encode("utf-8"), right.encode("utf-8"))
