"""
Notification state repository (persistence).

Stores the id of the tracked webhook message so it survives restarts. The
state is a single key-value record; callers load it, hand it to the publisher
and save whatever the publisher returns.

Backends:
- JsonNotificationStateRepository: `<data_dir>/metadata.json`
- SupabaseNotificationStateRepository: one row in the `app_metadata` table
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from domain.notification import NotificationState
from repositories.sale_repository import RepositoryError, execute_query, write_json_atomic

logger = logging.getLogger(__name__)

# Key used in both backends for the tracked message id.
MESSAGE_ID_KEY: str = "discordMessageId"

_METADATA_TABLE: str = "app_metadata"


class NotificationStateRepository(ABC):

    @abstractmethod
    def load(self) -> NotificationState:
        pass

    @abstractmethod
    def save(self, state: NotificationState) -> None:
        pass


class JsonNotificationStateRepository(NotificationStateRepository):
    """
    State kept in a small JSON object file.

    Unknown keys in the file are preserved on save. An unreadable file is
    treated as empty state (the next publish creates a fresh message).
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Ignoring unreadable notification state file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> NotificationState:
        message_id = self._read().get(MESSAGE_ID_KEY)
        return NotificationState(remote_message_id=str(message_id) if message_id else None)

    def save(self, state: NotificationState) -> None:
        data = self._read()
        if state.remote_message_id:
            data[MESSAGE_ID_KEY] = state.remote_message_id
        else:
            data.pop(MESSAGE_ID_KEY, None)
        try:
            write_json_atomic(self.path, data)
        except OSError as e:
            raise RepositoryError(f"Failed to write notification state {self.path}: {e}") from e


class SupabaseNotificationStateRepository(NotificationStateRepository):
    """
    State kept as a row of the `app_metadata` key-value table.

    Columns: key (text, pk), value (text, nullable).
    """

    def __init__(self, client: Any, table: str = _METADATA_TABLE):
        self.client = client
        self.table = table

    def load(self) -> NotificationState:
        query = (
            self.client.table(self.table)
            .select("value")
            .eq("key", MESSAGE_ID_KEY)
            .limit(1)
        )
        rows = execute_query(query, "load notification state")
        if not rows or not rows[0].get("value"):
            return NotificationState()
        return NotificationState(remote_message_id=str(rows[0]["value"]))

    def save(self, state: NotificationState) -> None:
        query = self.client.table(self.table).upsert(
            {"key": MESSAGE_ID_KEY, "value": state.remote_message_id}
        )
        execute_query(query, "save notification state")


__all__ = [
    "JsonNotificationStateRepository",
    "MESSAGE_ID_KEY",
    "NotificationStateRepository",
    "SupabaseNotificationStateRepository",
]
