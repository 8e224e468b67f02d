"""Port for outbound entity notifications such as activation e-mails."""

from __future__ import annotations

from typing import Any, Protocol


class NotifierPort(Protocol):
    """Notification contract; delivery belongs to the host."""

    def notify(self, template_key: str, entity: Any) -> object:
        """Build (and optionally deliver) the message for one template."""
