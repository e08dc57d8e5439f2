"""
Discord webhook client.

Supports the two operations the notifier needs:
- create a message:  POST  <webhook>?wait=true   (returns the message id)
- edit a message:    PATCH <webhook>/messages/<id>

Failures are returned as ChannelResult values instead of raised, so the
publisher can switch on ChannelStatus:
- SUCCESS:   2xx response
- NOT_FOUND: 404 (the message or webhook no longer exists)
- ERROR:     any other status, timeout or connection error
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol

import requests


class ChannelStatus(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ChannelResult:
    """
    Outcome of one webhook call.

    message_id is only set for a successful create that returned an id.
    """
    status: ChannelStatus
    message_id: Optional[str] = None
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ChannelStatus.SUCCESS

    @classmethod
    def success(cls, message_id: Optional[str] = None, status_code: Optional[int] = None) -> "ChannelResult":
        return cls(status=ChannelStatus.SUCCESS, message_id=message_id, status_code=status_code)

    @classmethod
    def not_found(cls, error: Optional[str] = None) -> "ChannelResult":
        return cls(status=ChannelStatus.NOT_FOUND, status_code=404, error=error)

    @classmethod
    def failure(cls, error: str, status_code: Optional[int] = None) -> "ChannelResult":
        return cls(status=ChannelStatus.ERROR, status_code=status_code, error=error)


class MessageChannel(Protocol):
    """Outbound channel contract used by the publisher."""

    def create_message(self, payload: dict[str, Any]) -> ChannelResult:
        ...

    def edit_message(self, message_id: str, payload: dict[str, Any]) -> ChannelResult:
        ...


class DiscordWebhookClient:
    """Webhook client backed by `requests`."""

    def __init__(self, webhook_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        if not webhook_url:
            raise ValueError("webhook_url must be a non-empty string")
        self.webhook_url = webhook_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def create_message(self, payload: dict[str, Any]) -> ChannelResult:
        try:
            response = self.session.post(
                self.webhook_url,
                params={"wait": "true"},
                headers=self._headers(),
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            return ChannelResult.failure(f"Webhook create failed: {e}")

        if response.status_code not in (200, 201):
            return ChannelResult.failure(
                f"Webhook create returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        message_id: Optional[str] = None
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("id"):
            message_id = str(data["id"])

        return ChannelResult.success(message_id=message_id, status_code=response.status_code)

    def edit_message(self, message_id: str, payload: dict[str, Any]) -> ChannelResult:
        try:
            response = self.session.patch(
                f"{self.webhook_url}/messages/{message_id}",
                headers=self._headers(),
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            return ChannelResult.failure(f"Webhook edit failed: {e}")

        if response.status_code == 404:
            return ChannelResult.not_found(f"Message {message_id} not found")
        if not 200 <= response.status_code < 300:
            return ChannelResult.failure(
                f"Webhook edit returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return ChannelResult.success(message_id=None, status_code=response.status_code)


__all__ = [
    "ChannelResult",
    "ChannelStatus",
    "DiscordWebhookClient",
    "MessageChannel",
]
