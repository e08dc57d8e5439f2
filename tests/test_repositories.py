"""
Tests for the JSON-file backends in `repositories/`.

Covers contract rules:
- Read-after-write within the same process.
- created_at is assigned on create and survives updates.
- Update/delete of an unknown id raises SaleNotFoundError.
- Notification state persists across repository instances (restarts).
"""

from __future__ import annotations

import json
from decimal import Decimal

import pytest

from domain.notification import NotificationState
from domain.sale import Sale, SaleStatus
from repositories.notification_state_repository import (
    MESSAGE_ID_KEY,
    JsonNotificationStateRepository,
)
from repositories.sale_repository import (
    JsonSaleRepository,
    RepositoryError,
    SaleNotFoundError,
)


@pytest.fixture
def sale_repo(tmp_path):
    return JsonSaleRepository(tmp_path / "data" / "sales.json")


def _sale(sale_id: str, name: str = "Infinity", value: str = "500") -> Sale:
    return Sale(sale_id=sale_id, name=name, value=Decimal(value))


class TestJsonSaleRepository:

    def test_missing_file_lists_nothing(self, sale_repo):
        assert sale_repo.list_sales() == []
        assert sale_repo.get_sale("nope") is None

    def test_create_then_list_in_insertion_order(self, sale_repo):
        first = sale_repo.create_sale(_sale("a"))
        sale_repo.create_sale(_sale("b", name="FW PRO", value="800"))

        sales = sale_repo.list_sales()

        assert [s.sale_id for s in sales] == ["a", "b"]
        assert first.created_at is not None
        assert sales[0] == first
        assert sales[1].value == Decimal("800")

    def test_duplicate_id_rejected(self, sale_repo):
        sale_repo.create_sale(_sale("a"))

        with pytest.raises(RepositoryError):
            sale_repo.create_sale(_sale("a"))

    def test_update_keeps_created_at(self, sale_repo):
        stored = sale_repo.create_sale(_sale("a"))

        updated = sale_repo.update_sale(
            Sale(sale_id="a", name="Infinity", value=Decimal("550"), status=SaleStatus.DELIVERED)
        )

        assert updated.created_at == stored.created_at
        assert sale_repo.get_sale("a").status is SaleStatus.DELIVERED
        assert sale_repo.get_sale("a").value == Decimal("550")

    def test_update_unknown_sale(self, sale_repo):
        with pytest.raises(SaleNotFoundError):
            sale_repo.update_sale(_sale("ghost"))

    def test_delete(self, sale_repo):
        sale_repo.create_sale(_sale("a"))
        sale_repo.create_sale(_sale("b"))

        sale_repo.delete_sale("a")

        assert [s.sale_id for s in sale_repo.list_sales()] == ["b"]
        with pytest.raises(SaleNotFoundError):
            sale_repo.delete_sale("a")

    def test_corrupt_file_raises(self, sale_repo):
        sale_repo.path.parent.mkdir(parents=True)
        sale_repo.path.write_text("{not json", encoding="utf-8")

        with pytest.raises(RepositoryError):
            sale_repo.list_sales()

    def test_values_stored_as_strings(self, sale_repo):
        sale_repo.create_sale(_sale("a", value="0.10"))

        rows = json.loads(sale_repo.path.read_text(encoding="utf-8"))

        assert rows[0]["value"] == "0.10"
        assert rows[0]["status"] == "pending"


class TestJsonNotificationStateRepository:

    def test_empty_when_missing(self, tmp_path):
        repo = JsonNotificationStateRepository(tmp_path / "metadata.json")
        assert repo.load() == NotificationState()

    def test_survives_new_instance(self, tmp_path):
        path = tmp_path / "metadata.json"
        JsonNotificationStateRepository(path).save(NotificationState(remote_message_id="M1"))

        assert JsonNotificationStateRepository(path).load().remote_message_id == "M1"

    def test_clear_keeps_other_keys(self, tmp_path):
        path = tmp_path / "metadata.json"
        path.write_text(json.dumps({MESSAGE_ID_KEY: "M1", "other": 1}), encoding="utf-8")
        repo = JsonNotificationStateRepository(path)

        repo.save(NotificationState())

        assert json.loads(path.read_text(encoding="utf-8")) == {"other": 1}
        assert repo.load().is_tracking is False

    def test_unreadable_file_is_empty_state(self, tmp_path):
        path = tmp_path / "metadata.json"
        path.write_text("garbage", encoding="utf-8")

        assert JsonNotificationStateRepository(path).load() == NotificationState()

    def test_invalid_utf8_file_is_empty_state(self, tmp_path):
        path = tmp_path / "metadata.json"
        path.write_bytes(b'{"discordMessageId": "\xff\xfe"}')

        assert JsonNotificationStateRepository(path).load() == NotificationState()

    def test_save_replaces_invalid_utf8_file(self, tmp_path):
        path = tmp_path / "metadata.json"
        path.write_bytes(b'{"discordMessageId": "\xff\xfe"}')
        repo = JsonNotificationStateRepository(path)

        repo.save(NotificationState(remote_message_id="M9"))

        assert json.loads(path.read_text(encoding="utf-8")) == {"discordMessageId": "M9"}
