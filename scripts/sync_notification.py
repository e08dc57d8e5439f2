#!/usr/bin/env python3
"""
Notification Sync Script

Republishes the sales dashboard to the configured webhook without changing
any sale. Useful after editing the ledger by hand or after the webhook URL
changed.

Usage:
    python scripts/sync_notification.py
    python scripts/sync_notification.py --reset      # forget the tracked message first
    python scripts/sync_notification.py --dry-run    # print the payload, send nothing
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from zoneinfo import ZoneInfo

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.dependencies import build_channel, build_repositories
from config import load_settings
from domain.notification import NotificationState
from domain.time import utc_now
from services.payload_builder import build_sync_payload
from services.publisher import PublishOutcome
from services.sync_service import NotificationSync


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Republish the sales dashboard webhook message",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Forget the tracked message id and post a new message"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the webhook payload instead of sending it"
    )
    args = parser.parse_args()

    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        sale_repository, state_repository = build_repositories(settings)
        tz = ZoneInfo(settings.display_timezone)

        if args.dry_run:
            payload = build_sync_payload(sale_repository.list_sales(), utc_now(), tz)
            print(json.dumps(payload, indent=2, ensure_ascii=False))
            return 0

        if args.reset:
            state_repository.save(NotificationState())
            print("Cleared tracked message id")

        sync = NotificationSync(
            repository=sale_repository,
            state_repository=state_repository,
            channel=build_channel(settings),
            tz=tz,
        )
        result = sync.sync()

        if result is None or result.outcome is PublishOutcome.FAILED:
            print("Sync failed; see log output above")
            return 1

        print(f"Sync {result.outcome.value}; tracked message: {result.state.remote_message_id or '-'}")
        return 0

    except KeyboardInterrupt:
        print("\n\nSync interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
