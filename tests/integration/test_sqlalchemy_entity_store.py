from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import pytest
import sqlalchemy as sa

from credential_core.application.config.auth_config import AuthConfig
from credential_core.application.modules.user_activation import UserActivationSettings
from credential_core.application.ports.encryption_strategy_port import EncodeParams
from credential_core.application.services.activation import activate
from credential_core.domain.auth.encryption_algorithm import EncryptionAlgorithm
from credential_core.infrastructure.db.entity_store import SqlAlchemyEntityStore
from credential_core.infrastructure.db.metadata import users
from credential_core.infrastructure.db.session import create_schema, create_session_factory


@dataclass
class User:
    username: str
    id: int | None = None
    email: str | None = None
    password: str | None = None
    crypted_password: str | None = None
    salt: str | None = None
    activation_state: str | None = None
    activation_token: str | None = None
    remember_me_token: str | None = None
    remember_me_token_expires_at: datetime | None = None


class FailingStrategy:
    supports_stretches = False
    supports_join_token = False
    requires_key = False

    def encode(self, tokens: Sequence[str], params: EncodeParams) -> str:
        raise RuntimeError("encoder unavailable")

    def matches(self, encoded: str, tokens: Sequence[str], params: EncodeParams) -> bool:
        return False


class FakeNotifier:
    def __init__(self) -> None:
        self.sent: list[str] = []

    def notify(self, template_key: str, entity: User) -> object:
        self.sent.append(template_key)
        return template_key


async def _store(tmp_path: Path, filename: str) -> SqlAlchemyEntityStore[User]:
    session_factory = create_session_factory(f"sqlite+aiosqlite:///{tmp_path / filename}")
    await create_schema(session_factory)
    return SqlAlchemyEntityStore(session_factory, table=users, entity_factory=User)


def _select_row(tmp_path: Path, filename: str, username: str) -> sa.RowMapping:
    engine = sa.create_engine(f"sqlite+pysqlite:///{tmp_path / filename}")
    with engine.connect() as connection:
        row = connection.execute(
            sa.select(users).where(users.c.username == username)
        ).mappings().one()
    engine.dispose()
    return row


@pytest.mark.asyncio
async def test_persist_encodes_credential_and_never_writes_plaintext(tmp_path: Path) -> None:
    store = await _store(tmp_path, "encode.db")
    auth = activate(User, store=store)

    user = await store.persist(User(username="ada", password="s3cret"))

    assert user.id is not None
    assert user.password is None
    row = _select_row(tmp_path, "encode.db", "ada")
    assert row["crypted_password"] == user.crypted_password
    assert row["salt"] == user.salt
    assert "s3cret" not in {value for value in row.values() if isinstance(value, str)}

    loaded = await auth.authenticate("ada", "s3cret")
    assert loaded is not None
    assert loaded.id == user.id
    assert await auth.authenticate("ada", "wrong") is None
    assert await auth.authenticate("nobody", "s3cret") is None


@pytest.mark.asyncio
async def test_password_change_reencodes_on_update(tmp_path: Path) -> None:
    store = await _store(tmp_path, "update.db")
    auth = activate(User, store=store)
    user = await store.persist(User(username="ada", password="first"))
    first_salt = user.salt

    user.password = "second"
    await store.persist(user)

    assert user.salt != first_salt
    assert await auth.authenticate("ada", "first") is None
    assert await auth.authenticate("ada", "second") is not None


@pytest.mark.asyncio
async def test_failed_encoding_aborts_insert(tmp_path: Path) -> None:
    store = await _store(tmp_path, "abort.db")

    def configure(config: AuthConfig) -> None:
        config.custom_encryption_strategy = FailingStrategy()
        config.encryption_algorithm = EncryptionAlgorithm.CUSTOM

    activate(User, store=store, configure=configure)

    with pytest.raises(RuntimeError, match="encoder unavailable"):
        await store.persist(User(username="ada", password="pw"))

    assert await store.find_one_by(field="username", value="ada") is None


@pytest.mark.asyncio
async def test_bcrypt_round_trip_through_database(tmp_path: Path) -> None:
    store = await _store(tmp_path, "bcrypt.db")

    def configure(config: AuthConfig) -> None:
        config.encryption_algorithm = EncryptionAlgorithm.BCRYPT
        config.stretches = 4
        config.salt_field = None

    auth = activate(User, store=store, configure=configure)
    await store.persist(User(username="ada", password="pw"))

    assert await auth.authenticate("ada", "pw") is not None
    assert await auth.authenticate("ada", "pw2") is None


@pytest.mark.asyncio
async def test_bcrypt_long_password_with_host_salt_round_trips(tmp_path: Path) -> None:
    store = await _store(tmp_path, "bcrypt_long.db")
    password = "p" * 100

    def configure(config: AuthConfig) -> None:
        config.encryption_algorithm = EncryptionAlgorithm.BCRYPT
        config.stretches = 4

    auth = activate(User, store=store, configure=configure)
    user = await store.persist(User(username="ada", password=password))

    assert user.salt is not None
    assert await auth.authenticate("ada", password) is not None
    assert await auth.authenticate("ada", password[:-1] + "q") is None


@pytest.mark.asyncio
async def test_user_activation_flow_with_database(tmp_path: Path) -> None:
    store = await _store(tmp_path, "activation.db")
    notifier = FakeNotifier()

    def configure(config: AuthConfig) -> None:
        settings: UserActivationSettings = config.settings_for("user_activation")
        settings.notifier = notifier

    auth = activate(User, store=store, modules=["user_activation"], configure=configure)
    user = await store.persist(User(username="ada", password="pw"))

    assert await auth.authenticate("ada", "pw") is None
    pending = await auth.load_from_activation_token(user.activation_token)
    assert pending is not None

    await auth.activate_account(pending)

    assert await auth.authenticate("ada", "pw") is not None
    assert notifier.sent == ["activation_needed_email", "activation_success_email"]


@pytest.mark.asyncio
async def test_find_one_by_rejects_unknown_column(tmp_path: Path) -> None:
    store = await _store(tmp_path, "columns.db")

    with pytest.raises(ValueError, match="unknown column"):
        await store.find_one_by(field="nickname", value="ada")
