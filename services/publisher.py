"""
Publisher: keeps a single webhook message in sync with the ledger.

State machine over NotificationState:
- No tracked message   -> create a message and track its id.
- Tracked message      -> edit it in place.
    - edit succeeded   -> state unchanged.
    - edit NOT_FOUND   -> the message was deleted remotely; clear the id and
                          create a new one within the same call.
    - any other error  -> abort, state unchanged (no create, so a transient
                          failure never duplicates the message).
- No channel configured -> no-op, no network I/O, state unchanged.

The publisher never persists anything itself. It receives the current state
and returns the updated one; the caller decides how to store it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from domain.notification import NotificationState
from services.discord_client import ChannelResult, ChannelStatus, MessageChannel

logger = logging.getLogger(__name__)


class PublishOutcome(str, Enum):
    SKIPPED = "skipped"
    EDITED = "edited"
    CREATED = "created"
    RECREATED = "recreated"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PublishResult:
    """
    Result of one publish call.

    state: NotificationState to persist (may equal the input state)
    outcome: What happened on the channel
    error: Channel error message when outcome is FAILED
    """
    state: NotificationState
    outcome: PublishOutcome
    error: Optional[str] = None


def _create(
    payload: dict[str, Any],
    state: NotificationState,
    channel: MessageChannel,
    outcome: PublishOutcome,
) -> PublishResult:
    result: ChannelResult = channel.create_message(payload)
    if not result.ok:
        logger.error("Failed to create webhook message: %s", result.error)
        return PublishResult(state=state, outcome=PublishOutcome.FAILED, error=result.error)

    if not result.message_id:
        logger.warning("Webhook create succeeded but returned no message id; message is not tracked")
        return PublishResult(state=state.cleared(), outcome=outcome)

    logger.info("Created webhook message %s", result.message_id)
    return PublishResult(state=state.track(result.message_id), outcome=outcome)


def publish(
    payload: dict[str, Any],
    state: NotificationState,
    channel: Optional[MessageChannel],
) -> PublishResult:
    """
    Publish `payload` as the single tracked webhook message.

    Args:
        payload: Webhook body (see payload_builder.build_sync_payload)
        state: Current notification state
        channel: Outbound channel, or None when no webhook is configured

    Returns:
        PublishResult with the state to persist. Never raises for channel
        failures; they are logged and reported as PublishOutcome.FAILED.
    """
    if channel is None:
        logger.warning("Webhook URL is not configured; skipping notification")
        return PublishResult(state=state, outcome=PublishOutcome.SKIPPED)

    if not state.is_tracking:
        return _create(payload, state, channel, PublishOutcome.CREATED)

    message_id = state.remote_message_id
    result = channel.edit_message(message_id, payload)

    if result.status is ChannelStatus.SUCCESS:
        logger.info("Updated webhook message %s", message_id)
        return PublishResult(state=state, outcome=PublishOutcome.EDITED)

    if result.status is ChannelStatus.NOT_FOUND:
        logger.info("Previous webhook message %s not found, creating a new one", message_id)
        return _create(payload, state.cleared(), channel, PublishOutcome.RECREATED)

    logger.error("Failed to update webhook message %s: %s", message_id, result.error)
    return PublishResult(state=state, outcome=PublishOutcome.FAILED, error=result.error)


__all__ = ["PublishOutcome", "PublishResult", "publish"]
