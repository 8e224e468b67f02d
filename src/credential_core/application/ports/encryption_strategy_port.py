"""Port for one-way credential encoding strategies."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class EncodeParams:
    """Per-call encoding parameters derived from the entity-type configuration."""

    stretches: int | None = None
    join_token: str | None = None
    key: bytes | None = None


class EncryptionStrategyPort(Protocol):
    """Encoding/verification contract shared by every algorithm variant."""

    supports_stretches: bool
    supports_join_token: bool
    requires_key: bool

    def encode(self, tokens: Sequence[str], params: EncodeParams) -> str:
        """Encode ordered plaintext tokens into a storable credential."""

    def matches(self, encoded: str, tokens: Sequence[str], params: EncodeParams) -> bool:
        """Return whether tokens encode to the stored credential."""
