"""
Tests for the operator scripts in `scripts/`.

Both CLIs run against a JSON ledger in a temp DATA_DIR. The webhook channel
and the Supabase client are replaced with the fakes from conftest.
"""

from __future__ import annotations

import json
import sys
from decimal import Decimal

import pytest
from postgrest.exceptions import APIError

from conftest import StubClient, supabase_response
from domain.notification import NotificationState
from domain.sale import Sale, SaleStatus
from repositories.notification_state_repository import (
    MESSAGE_ID_KEY,
    JsonNotificationStateRepository,
)
from repositories.sale_repository import JsonSaleRepository
from scripts import import_json_to_supabase, sync_notification
from services.discord_client import ChannelResult


@pytest.fixture(autouse=True)
def ledger_env(monkeypatch, tmp_path):
    for name in ("WEBHOOK_TIMEOUT_SECONDS", "DISPLAY_TIMEZONE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STORAGE_BACKEND", "json")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DISCORD_WEBHOOK_URL", "https://discord.com/api/webhooks/1/abc")


@pytest.fixture
def sales(tmp_path):
    repo = JsonSaleRepository(tmp_path / "sales.json")
    repo.create_sale(Sale(sale_id="s1", name="Infinity", value=Decimal("500"), status=SaleStatus.DELIVERED))
    repo.create_sale(Sale(sale_id="s2", name="FW PRO", value=Decimal("800"), buyer="Ana"))
    return repo


@pytest.fixture
def metadata(tmp_path):
    return JsonNotificationStateRepository(tmp_path / "metadata.json")


def _row(sale_id):
    return {"id": sale_id, "name": "Infinity", "value": "500.00", "buyer": "Maria", "status": "pending"}


def run(monkeypatch, module, *args):
    monkeypatch.setattr(sys, "argv", [module.__name__, *args])
    return module.main()


class TestSyncNotification:

    @pytest.fixture
    def channel(self, monkeypatch, fake_channel):
        monkeypatch.setattr(sync_notification, "build_channel", lambda settings: fake_channel)
        return fake_channel

    def test_publishes_and_tracks_message(self, monkeypatch, capsys, sales, metadata, channel):
        assert run(monkeypatch, sync_notification) == 0

        assert [call[0] for call in channel.calls] == ["create"]
        assert metadata.load() == NotificationState(remote_message_id="M1")
        assert "Sync created; tracked message: M1" in capsys.readouterr().out

    def test_edits_tracked_message(self, monkeypatch, sales, metadata, channel):
        metadata.save(NotificationState(remote_message_id="M7"))

        assert run(monkeypatch, sync_notification) == 0

        assert [call[:2] for call in channel.calls] == [("edit", "M7")]
        assert metadata.load().remote_message_id == "M7"

    def test_reset_posts_a_new_message(self, monkeypatch, capsys, sales, metadata, channel):
        metadata.save(NotificationState(remote_message_id="OLD"))

        assert run(monkeypatch, sync_notification, "--reset") == 0

        assert [call[0] for call in channel.calls] == ["create"]
        assert metadata.load().remote_message_id == "M1"
        assert "Cleared tracked message id" in capsys.readouterr().out

    def test_dry_run_prints_payload_and_sends_nothing(self, monkeypatch, capsys, sales, metadata, channel):
        assert run(monkeypatch, sync_notification, "--dry-run") == 0

        payload = json.loads(capsys.readouterr().out)
        embed = payload["embeds"][0]
        assert "R$ 1300.00" in embed["description"]
        assert embed["fields"][0]["name"] == "⏳ Pendentes (1)"
        assert channel.calls == []
        assert not metadata.path.exists()

    def test_failed_publish_exits_1(self, monkeypatch, capsys, sales, metadata, channel):
        channel.create_results.append(ChannelResult.failure("HTTP 500", status_code=500))

        assert run(monkeypatch, sync_notification) == 1

        assert metadata.load() == NotificationState()
        assert "Sync failed" in capsys.readouterr().out

    def test_unreadable_ledger_exits_1(self, monkeypatch, tmp_path, channel):
        (tmp_path / "sales.json").write_text("{not json", encoding="utf-8")

        assert run(monkeypatch, sync_notification) == 1
        assert channel.calls == []


class TestImportJsonToSupabase:

    @pytest.fixture
    def install_client(self, monkeypatch):
        def install(client):
            monkeypatch.setattr(import_json_to_supabase, "get_supabase", lambda url, key: client)
            return client
        return install

    def test_skips_existing_sales_and_copies_state(self, tmp_path, sales, metadata, install_client):
        metadata.save(NotificationState(remote_message_id="M7"))
        client = install_client(StubClient(
            supabase_response([_row("s1")]),  # s1 already imported
            supabase_response([]),  # s2 missing
            supabase_response([_row("s2")]),  # insert s2
            supabase_response([]),  # upsert state
        ))

        stats = import_json_to_supabase.import_ledger(tmp_path)

        assert stats == {"imported": 1, "skipped": 1}
        table, ops = client.queries[2]
        assert table == "sales"
        assert ops[0][0] == "insert"
        assert ops[0][1][0]["id"] == "s2"
        assert client.queries[3] == (
            "app_metadata",
            [("upsert", ({"key": MESSAGE_ID_KEY, "value": "M7"},), {})],
        )

    def test_dry_run_writes_nothing(self, tmp_path, sales, metadata, install_client):
        metadata.save(NotificationState(remote_message_id="M7"))
        client = install_client(StubClient(supabase_response([]), supabase_response([])))

        stats = import_json_to_supabase.import_ledger(tmp_path, dry_run=True)

        assert stats == {"imported": 2, "skipped": 0}
        assert [ops[0][0] for _, ops in client.queries] == ["select", "select"]

    def test_main_reports_counts(self, monkeypatch, capsys, tmp_path, sales, install_client):
        install_client(StubClient(supabase_response([_row("s1")]), supabase_response([_row("s2")])))

        assert run(monkeypatch, import_json_to_supabase, "--data-dir", str(tmp_path)) == 0

        assert "Imported 0 sales, skipped 2 existing" in capsys.readouterr().out

    def test_main_exits_1_on_supabase_error(self, monkeypatch, capsys, tmp_path, sales, install_client):
        install_client(StubClient(APIError({"message": "permission denied for table sales"})))

        assert run(monkeypatch, import_json_to_supabase, "--data-dir", str(tmp_path)) == 1

        assert "Import failed: Failed to fetch sale: permission denied" in capsys.readouterr().out
