"""
Notification sync: mirrors the ledger into the webhook message.

NotificationSync is registered as a SaleService post-commit hook. On every
committed mutation it re-reads the full sale list and runs

    summarize -> format_sales_table -> build_sync_payload -> publish

synchronously, then persists the returned NotificationState if it changed.

Concurrency note: state is read, published and written back without locking.
Two overlapping syncs may both create a message; the last write wins and the
other message is left untracked.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from domain.time import utc_now
from repositories.notification_state_repository import NotificationStateRepository
from repositories.sale_repository import SaleRepository
from services.discord_client import MessageChannel
from services.payload_builder import DEFAULT_DISPLAY_TIMEZONE, build_sync_payload
from services.publisher import PublishResult, publish
from services.sale_service import SaleMutation

logger = logging.getLogger(__name__)


class NotificationSync:
    """Post-commit hook that republishes the dashboard message."""

    def __init__(
        self,
        repository: SaleRepository,
        state_repository: NotificationStateRepository,
        channel: Optional[MessageChannel],
        tz: Optional[ZoneInfo] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.state_repository = state_repository
        self.channel = channel
        self.tz = tz or ZoneInfo(DEFAULT_DISPLAY_TIMEZONE)
        self.clock = clock

    def __call__(self, mutation: SaleMutation) -> Optional[PublishResult]:
        logger.debug("Syncing notification after %s of sale %s", mutation.kind.value, mutation.sale_id)
        return self.sync()

    def sync(self) -> Optional[PublishResult]:
        """
        Run the full pipeline once.

        Returns:
            PublishResult, or None if the ledger or state could not be read or
            the new state could not be saved (logged with traceback).
        """
        try:
            state = self.state_repository.load()
            if self.channel is None:
                return publish({}, state, None)
            sales = self.repository.list_sales()
        except Exception:
            logger.exception("Failed to read ledger for notification sync")
            return None

        payload = build_sync_payload(sales, self.clock(), self.tz)
        result = publish(payload, state, self.channel)

        if result.state != state:
            try:
                self.state_repository.save(result.state)
            except Exception:
                logger.exception("Failed to persist notification state %s", result.state)
                return None

        return result


__all__ = ["NotificationSync"]
