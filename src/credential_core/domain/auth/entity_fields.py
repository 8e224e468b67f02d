"""Typed accessors for the host entity attributes named by configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldAccessor:
    """Read/write access to one named attribute of a host entity."""

    name: str

    def get(self, entity: object) -> Any:
        return getattr(entity, self.name, None)

    def set(self, entity: object, value: Any) -> None:
        setattr(entity, self.name, value)

    def is_populated(self, entity: object) -> bool:
        """Return whether the attribute holds a non-empty value."""

        value = self.get(entity)
        return value is not None and value != ""


@dataclass(frozen=True)
class EntityFields:
    """Accessors bound once when an authentication configuration is sealed."""

    username: FieldAccessor
    password: FieldAccessor
    email: FieldAccessor
    encoded_credential: FieldAccessor
    salt: FieldAccessor | None
