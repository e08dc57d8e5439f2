"""
Domain: notification state.

One NotificationState exists per deployment. It remembers the id of the last
webhook message that was successfully published, so the next sync can edit
that message in place instead of posting a new one.

Invariant: at most one remote message is tracked at a time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class NotificationState:
    remote_message_id: Optional[str] = None

    @property
    def is_tracking(self) -> bool:
        return bool(self.remote_message_id)

    def track(self, message_id: str) -> "NotificationState":
        """Return a state tracking `message_id`."""
        if not message_id:
            raise ValueError("message_id must be a non-empty string")
        return NotificationState(remote_message_id=message_id)

    def cleared(self) -> "NotificationState":
        """Return a state with no tracked message."""
        return NotificationState()
