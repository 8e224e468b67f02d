"""Per-entity-type authentication configuration."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from credential_core.application.config.sealable import Sealable
from credential_core.application.ports.encryption_strategy_port import EncryptionStrategyPort
from credential_core.domain.auth.encryption_algorithm import EncryptionAlgorithm
from credential_core.domain.auth.entity_fields import EntityFields, FieldAccessor
from credential_core.domain.auth.errors import ConfigurationError, SealedConfigError
from credential_core.infrastructure.security.aes_strategy import validate_aes256_key
from credential_core.infrastructure.security.strategy_catalog import builtin_strategy

if TYPE_CHECKING:
    from credential_core.config.settings import Settings

PostConfigHook = Callable[["AuthConfig"], None]
PreAuthenticateHook = Callable[[Any, "AuthConfig"], bool]
ConfigPersistHook = Callable[[Any, "AuthConfig", bool], None]


class AuthConfig(Sealable):
    """Mutable during activation, sealed afterwards.

    Setting `encryption_algorithm` re-derives `encryption_strategy` at once, so
    a `custom` selection without a strategy fails inside the configure block.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Restore every option and hook registry to its default."""

        self.username_field = "username"
        self.password_field = "password"
        self.email_field = "email"
        self.encoded_credential_field = "crypted_password"
        self.salt_field: str | None = "salt"
        self.salt_join_token = ""
        self.stretches: int | None = None
        self.encryption_key: str | bytes | None = None
        self.active_modules: list[str] = []
        self.post_config_hooks: Sequence[PostConfigHook] = []
        self.pre_authenticate_hooks: Sequence[PreAuthenticateHook] = []
        self.before_persist_hooks: Sequence[ConfigPersistHook] = []
        self.after_persist_hooks: Sequence[ConfigPersistHook] = []
        self.module_settings: dict[str, Any] = {}
        self.fields: EntityFields | None = None
        self._custom_encryption_strategy: EncryptionStrategyPort | None = None
        self.encryption_algorithm = EncryptionAlgorithm.SHA256

    @property
    def encryption_algorithm(self) -> EncryptionAlgorithm:
        return self._encryption_algorithm

    @encryption_algorithm.setter
    def encryption_algorithm(self, value: EncryptionAlgorithm | str) -> None:
        try:
            algorithm = EncryptionAlgorithm(value)
        except ValueError as exc:
            raise ConfigurationError(f"unknown encryption algorithm: {value}") from exc

        if algorithm is EncryptionAlgorithm.CUSTOM:
            if self._custom_encryption_strategy is None:
                raise ConfigurationError(
                    "custom encryption algorithm selected without custom_encryption_strategy"
                )
            strategy: EncryptionStrategyPort | None = self._custom_encryption_strategy
        else:
            strategy = builtin_strategy(algorithm)

        self._encryption_algorithm = algorithm
        self._encryption_strategy = strategy

    @property
    def encryption_strategy(self) -> EncryptionStrategyPort | None:
        """Active strategy, or None when the algorithm is `none`."""

        return self._encryption_strategy

    @property
    def custom_encryption_strategy(self) -> EncryptionStrategyPort | None:
        return self._custom_encryption_strategy

    @custom_encryption_strategy.setter
    def custom_encryption_strategy(self, strategy: EncryptionStrategyPort | None) -> None:
        self._custom_encryption_strategy = strategy
        if self._encryption_algorithm is EncryptionAlgorithm.CUSTOM:
            self.encryption_algorithm = EncryptionAlgorithm.CUSTOM

    @property
    def encryption_key_bytes(self) -> bytes | None:
        if self.encryption_key is None or isinstance(self.encryption_key, bytes):
            return self.encryption_key
        return self.encryption_key.encode("utf-8")

    def after_config(self, hook: PostConfigHook) -> None:
        self._append_hook("post_config_hooks", hook)

    def before_authenticate(self, hook: PreAuthenticateHook) -> None:
        self._append_hook("pre_authenticate_hooks", hook)

    def before_persist(self, hook: ConfigPersistHook) -> None:
        self._append_hook("before_persist_hooks", hook)

    def after_persist(self, hook: ConfigPersistHook) -> None:
        self._append_hook("after_persist_hooks", hook)

    def settings_for(self, module_name: str) -> Any:
        """Return the settings object a capability module stored on this config."""

        try:
            return self.module_settings[module_name]
        except KeyError as exc:
            raise ConfigurationError(f"capability module not active: {module_name}") from exc

    def apply_settings(self, settings: Settings) -> None:
        """Copy environment-derived defaults into this config."""

        self.encryption_algorithm = settings.encryption_algorithm
        self.salt_join_token = settings.salt_join_token
        if settings.encryption_key is not None:
            self.encryption_key = settings.encryption_key
        if settings.stretches is not None:
            self.stretches = settings.stretches

    def seal(self) -> None:
        """Validate, bind field accessors and freeze the configuration."""

        self._validate()
        self.fields = EntityFields(
            username=FieldAccessor(self.username_field),
            password=FieldAccessor(self.password_field),
            email=FieldAccessor(self.email_field),
            encoded_credential=FieldAccessor(self.encoded_credential_field),
            salt=FieldAccessor(self.salt_field) if self.salt_field else None,
        )
        self.active_modules = tuple(self.active_modules)
        self.post_config_hooks = tuple(self.post_config_hooks)
        self.pre_authenticate_hooks = tuple(self.pre_authenticate_hooks)
        self.before_persist_hooks = tuple(self.before_persist_hooks)
        self.after_persist_hooks = tuple(self.after_persist_hooks)
        self.module_settings = MappingProxyType(dict(self.module_settings))
        for module_settings in self.module_settings.values():
            if isinstance(module_settings, Sealable):
                module_settings.seal()
        super().seal()

    def _validate(self) -> None:
        if self.stretches is not None and (
            isinstance(self.stretches, bool)
            or not isinstance(self.stretches, int)
            or self.stretches < 1
        ):
            raise ConfigurationError(f"stretches must be a positive integer, got {self.stretches!r}")

        strategy = self._encryption_strategy
        if self._encryption_algorithm is EncryptionAlgorithm.CUSTOM and strategy is None:
            raise ConfigurationError("custom encryption algorithm has no strategy")
        if self._encryption_algorithm is EncryptionAlgorithm.AES256:
            validate_aes256_key(self.encryption_key_bytes)
        elif strategy is not None and strategy.requires_key and self.encryption_key is None:
            raise ConfigurationError(
                f"encryption_key is required for the {self._encryption_algorithm} algorithm"
            )

    def _append_hook(self, registry: str, hook: Callable[..., Any]) -> None:
        if self.sealed:
            raise SealedConfigError(attribute=registry)
        getattr(self, registry).append(hook)
