"""Port for the host entity store the authentication core attaches to."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any, Protocol


class PersistHook(Protocol):
    """Callable invoked around one persist of a host entity."""

    def __call__(self, entity: Any, *, is_new: bool) -> None: ...


class EntityStorePort(Protocol):
    """Entity lookup and persistence contract.

    `find_one_by` and `persist` may be plain or coroutine functions; callers
    await the result only when it is awaitable. A before-persist hook that
    raises aborts the persist; after-persist hooks run only on success.
    """

    def find_one_by(self, *, field: str, value: object) -> Any | Awaitable[Any]:
        """Return the single entity whose `field` equals `value`, or None."""

    def persist(self, entity: Any) -> Any | Awaitable[Any]:
        """Save the entity, running registered hooks around the write."""

    def add_before_persist(self, hook: PersistHook) -> None:
        """Register a hook run before each write."""

    def add_after_persist(self, hook: PersistHook) -> None:
        """Register a hook run after each successful write."""
