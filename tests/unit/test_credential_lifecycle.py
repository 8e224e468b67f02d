from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from itertools import count
from typing import Any

import pytest

from credential_core.application.config.auth_config import AuthConfig
from credential_core.application.ports.encryption_strategy_port import EncodeParams
from credential_core.application.services.authenticator import Authenticator
from credential_core.application.services.credential_lifecycle import CredentialLifecycle
from credential_core.domain.auth.encryption_algorithm import EncryptionAlgorithm


@dataclass
class User:
    username: str
    password: str | None = None
    crypted_password: str | None = None
    salt: str | None = None


class NullStore:
    def find_one_by(self, *, field: str, value: object) -> None:
        _ = field, value

    def persist(self, entity: Any) -> Any:
        return entity

    def add_before_persist(self, hook: Any) -> None:
        _ = hook

    def add_after_persist(self, hook: Any) -> None:
        _ = hook


class FailingStrategy:
    supports_stretches = False
    supports_join_token = False
    requires_key = False

    def encode(self, tokens: Sequence[str], params: EncodeParams) -> str:
        raise RuntimeError("encoder unavailable")

    def matches(self, encoded: str, tokens: Sequence[str], params: EncodeParams) -> bool:
        return False


def _lifecycle(config: AuthConfig, **kwargs: Any) -> tuple[CredentialLifecycle, Authenticator]:
    config.seal()
    authenticator = Authenticator(config=config, store=NullStore(), entity_name="User")
    return CredentialLifecycle(config=config, authenticator=authenticator, **kwargs), authenticator


def test_before_persist_stores_salt_and_encoded_credential() -> None:
    lifecycle, authenticator = _lifecycle(AuthConfig())
    user = User(username="ada", password="pw")

    lifecycle.before_persist(user, is_new=True)

    assert user.salt
    assert user.crypted_password == authenticator.encrypt("pw", user.salt)
    assert user.crypted_password != "pw"


def test_salt_is_fresh_across_derivations() -> None:
    lifecycle, _ = _lifecycle(AuthConfig())
    first = User(username="ada", password="pw")
    second = User(username="ada", password="pw")

    lifecycle.before_persist(first, is_new=True)
    lifecycle.before_persist(second, is_new=True)

    assert first.salt != second.salt
    assert first.crypted_password != second.crypted_password


def test_salt_factory_is_injectable() -> None:
    counter = count(1)
    lifecycle, _ = _lifecycle(AuthConfig(), salt_factory=lambda: f"salt-{next(counter)}")
    user = User(username="ada", password="pw")

    lifecycle.before_persist(user, is_new=True)

    assert user.salt == "salt-1"


def test_existing_entity_without_plaintext_keeps_credential() -> None:
    lifecycle, _ = _lifecycle(AuthConfig())
    user = User(username="ada", crypted_password="stored", salt="s")

    lifecycle.before_persist(user, is_new=False)

    assert user.crypted_password == "stored"
    assert user.salt == "s"


def test_existing_entity_with_new_plaintext_is_reencoded() -> None:
    lifecycle, authenticator = _lifecycle(AuthConfig())
    user = User(username="ada", password="new-pw", crypted_password="stored", salt="s")

    lifecycle.before_persist(user, is_new=False)

    assert user.salt != "s"
    assert user.crypted_password == authenticator.encrypt("new-pw", user.salt)


def test_no_salt_field_encodes_plaintext_alone() -> None:
    config = AuthConfig()
    config.salt_field = None
    lifecycle, authenticator = _lifecycle(config)
    user = User(username="ada", password="pw")

    lifecycle.before_persist(user, is_new=True)

    assert user.salt is None
    assert user.crypted_password == authenticator.encrypt("pw")


def test_none_algorithm_stores_plaintext() -> None:
    config = AuthConfig()
    config.encryption_algorithm = EncryptionAlgorithm.NONE
    lifecycle, _ = _lifecycle(config)
    user = User(username="ada", password="pw")

    lifecycle.before_persist(user, is_new=True)

    assert user.crypted_password == "pw"


def test_encoding_failure_leaves_stored_fields_untouched() -> None:
    config = AuthConfig()
    config.custom_encryption_strategy = FailingStrategy()
    config.encryption_algorithm = EncryptionAlgorithm.CUSTOM
    lifecycle, _ = _lifecycle(config)
    user = User(username="ada", password="pw", crypted_password="old", salt="old-salt")

    with pytest.raises(RuntimeError, match="encoder unavailable"):
        lifecycle.before_persist(user, is_new=False)

    assert user.crypted_password == "old"
    assert user.salt == "old-salt"


def test_after_persist_clears_plaintext_only() -> None:
    lifecycle, _ = _lifecycle(AuthConfig())
    user = User(username="ada", password="pw")
    lifecycle.before_persist(user, is_new=True)

    lifecycle.after_persist(user, is_new=True)

    assert user.password is None
    assert user.crypted_password


def test_module_persist_hooks_run_in_order_with_config() -> None:
    calls: list[tuple[str, bool]] = []
    config = AuthConfig()
    config.before_persist(lambda entity, cfg, is_new: calls.append(("before", is_new)))
    config.after_persist(lambda entity, cfg, is_new: calls.append(("after", is_new)))
    lifecycle, _ = _lifecycle(config)
    user = User(username="ada", password="pw")

    lifecycle.before_persist(user, is_new=True)
    lifecycle.after_persist(user, is_new=True)

    assert calls == [("before", True), ("after", True)]
