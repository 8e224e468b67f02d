"""Account activation states written by the user-activation module."""

from __future__ import annotations

from enum import StrEnum


class ActivationState(StrEnum):
    """Lifecycle states for entities that must confirm their account."""

    PENDING = "pending"
    ACTIVE = "active"
