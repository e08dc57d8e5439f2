#!/usr/bin/env python3
"""
JSON to Supabase Import Script

Copies sales and the tracked message id from the JSON backend files
(`sales.json`, `metadata.json`) into Supabase. Sales that already exist in
Supabase (same id) are skipped, so the script can be re-run safely.

Usage:
    python scripts/import_json_to_supabase.py
    python scripts/import_json_to_supabase.py --data-dir ./data --dry-run
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import load_settings
from repositories.client import get_supabase
from repositories.notification_state_repository import (
    JsonNotificationStateRepository,
    SupabaseNotificationStateRepository,
)
from repositories.sale_repository import JsonSaleRepository, SupabaseSaleRepository


def import_ledger(data_dir: Path, dry_run: bool = False) -> dict[str, int]:
    """
    Copy the JSON ledger into Supabase.

    Returns:
        Counts: {"imported": n, "skipped": n}
    """
    settings = load_settings()
    client = get_supabase(settings.supabase_url, settings.supabase_key)
    source = JsonSaleRepository(data_dir / "sales.json")
    target = SupabaseSaleRepository(client)

    stats = {"imported": 0, "skipped": 0}
    for sale in source.list_sales():
        if target.get_sale(sale.sale_id) is not None:
            stats["skipped"] += 1
            continue
        if not dry_run:
            target.create_sale(sale)
        stats["imported"] += 1

    state = JsonNotificationStateRepository(data_dir / "metadata.json").load()
    if state.is_tracking and not dry_run:
        SupabaseNotificationStateRepository(client).save(state)

    return stats


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Import the JSON sales ledger into Supabase")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding sales.json and metadata.json (default: DATA_DIR)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Count what would be imported without writing"
    )
    args = parser.parse_args()

    data_dir = args.data_dir or load_settings().data_dir

    try:
        stats = import_ledger(data_dir, dry_run=args.dry_run)
    except RuntimeError as e:
        print(f"Import failed: {e}")
        return 1

    prefix = "[DRY RUN] " if args.dry_run else ""
    print(f"{prefix}Imported {stats['imported']} sales, skipped {stats['skipped']} existing")
    return 0


if __name__ == "__main__":
    sys.exit(main())
