"""Base for configuration objects that become read-only after activation."""

from __future__ import annotations

from typing import Any

from credential_core.domain.auth.errors import SealedConfigError


class Sealable:
    """Reject attribute assignment once `seal()` has been called."""

    _sealed = False

    def __setattr__(self, name: str, value: Any) -> None:
        if self._sealed:
            raise SealedConfigError(attribute=name)
        super().__setattr__(name, value)

    def seal(self) -> None:
        object.__setattr__(self, "_sealed", True)

    @property
    def sealed(self) -> bool:
        return self._sealed
