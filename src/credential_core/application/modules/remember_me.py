"""Capability module issuing long-lived remember-me tokens."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import partial
from typing import TYPE_CHECKING, Any

from credential_core.application.config.auth_config import AuthConfig
from credential_core.application.config.sealable import Sealable
from credential_core.application.modules.capability_module import ModuleOperation
from credential_core.application.ports.maybe_awaitable import resolve
from credential_core.domain.auth.entity_fields import FieldAccessor
from credential_core.domain.auth.random_codes import generate_random_code

if TYPE_CHECKING:
    from credential_core.application.services.entity_auth import EntityAuth

REMEMBER_ME = "remember_me"
NowCallable = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class RememberMeSettings(Sealable):
    """Options added to the config by the remember-me module."""

    remember_me_token_field: str = "remember_me_token"
    remember_me_token_expires_at_field: str = "remember_me_token_expires_at"
    remember_me_for: timedelta = timedelta(weeks=1)

    @property
    def token(self) -> FieldAccessor:
        return FieldAccessor(self.remember_me_token_field)

    @property
    def expires_at(self) -> FieldAccessor:
        return FieldAccessor(self.remember_me_token_expires_at_field)


class RememberMeModule:
    """Adds remember/forget operations backed by a token and an expiry."""

    name = REMEMBER_ME

    def __init__(self, *, now: NowCallable = _utc_now) -> None:
        self._now = now

    def apply(self, config: AuthConfig) -> None:
        config.module_settings[self.name] = RememberMeSettings()

    def operations(self, auth: EntityAuth) -> Mapping[str, ModuleOperation]:
        return {
            "remember_me": partial(self.remember_me, auth),
            "forget_me": partial(self.forget_me, auth),
            "load_from_remember_me_token": partial(self.load_from_remember_me_token, auth),
        }

    async def remember_me(self, auth: EntityAuth, entity: Any) -> str:
        """Issue a fresh token valid for `remember_me_for` and persist it."""

        settings: RememberMeSettings = auth.config.settings_for(REMEMBER_ME)
        token = generate_random_code()
        settings.token.set(entity, token)
        settings.expires_at.set(entity, self._now() + settings.remember_me_for)
        await auth.persist(entity)
        return token

    async def forget_me(self, auth: EntityAuth, entity: Any) -> None:
        settings: RememberMeSettings = auth.config.settings_for(REMEMBER_ME)
        settings.token.set(entity, None)
        settings.expires_at.set(entity, None)
        await auth.persist(entity)

    async def load_from_remember_me_token(self, auth: EntityAuth, token: str) -> Any | None:
        """Return the entity for an unexpired token, or None."""

        if not token:
            return None
        settings: RememberMeSettings = auth.config.settings_for(REMEMBER_ME)
        entity = await resolve(
            auth.store.find_one_by(field=settings.remember_me_token_field, value=token)
        )
        if entity is None:
            return None

        expires_at = settings.expires_at.get(entity)
        if expires_at is None:
            return None
        if expires_at.tzinfo is None:
            # SQLite hands back naive datetimes for timezone-aware columns.
            expires_at = expires_at.replace(tzinfo=UTC)
        if expires_at <= self._now():
            return None
        return entity
