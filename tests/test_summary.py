"""
Tests for `domain/summary.py`.

Covers contract rules:
- total_revenue equals the sum of the per-status subtotals.
- net_profit depends only on delivered sales, minus each product's unit cost.
- unit costs match by case-insensitive substring; unknown products cost 0.
- Empty input yields zero sums and empty partitions.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from domain.sale import Sale, SaleStatus
from domain.summary import summarize, unit_cost


def _sale(sale_id: str, name: str, value: str, status: SaleStatus) -> Sale:
    return Sale(sale_id=sale_id, name=name, value=Decimal(value), status=status)


def test_reference_example() -> None:
    """Delivered Infinity (500) and pending FW PRO (800)."""
    sales = [
        _sale("1", "Infinity", "500", SaleStatus.DELIVERED),
        _sale("2", "FW PRO", "800", SaleStatus.PENDING),
    ]

    summary = summarize(sales)

    assert summary.total_revenue == Decimal("1300.00")
    assert summary.pending_revenue == Decimal("800.00")
    assert summary.net_profit == Decimal("250.00")


def test_empty_ledger() -> None:
    summary = summarize([])

    assert summary.total_revenue == 0
    assert summary.pending_revenue == 0
    assert summary.net_profit == 0
    assert summary.pending == ()
    assert summary.delivered == ()
    assert summary.cancelled == ()
    assert summary.counts_by_status == {
        SaleStatus.PENDING: 0,
        SaleStatus.DELIVERED: 0,
        SaleStatus.CANCELLED: 0,
    }


def test_total_equals_sum_of_status_subtotals() -> None:
    sales = [
        _sale("1", "Infinity", "500.10", SaleStatus.DELIVERED),
        _sale("2", "FW PRO", "800.25", SaleStatus.PENDING),
        _sale("3", "Cabo", "19.90", SaleStatus.CANCELLED),
        _sale("4", "infinity max", "620", SaleStatus.PENDING),
    ]

    summary = summarize(sales)

    assert summary.total_revenue == (
        summary.pending_revenue + summary.delivered_revenue + summary.cancelled_revenue
    )
    assert summary.total_revenue == Decimal("1940.25")


@pytest.mark.parametrize("status", [SaleStatus.PENDING, SaleStatus.CANCELLED])
def test_net_profit_ignores_non_delivered_sales(status: SaleStatus) -> None:
    base = [_sale("1", "Infinity", "500", SaleStatus.DELIVERED)]
    before = summarize(base + [_sale("2", "FW PRO", "800", status)])
    after = summarize(base + [_sale("2", "FW PRO", "9999", status)])

    assert before.net_profit == after.net_profit == Decimal("250")


def test_net_profit_can_be_negative() -> None:
    summary = summarize([_sale("1", "FW PRO", "400", SaleStatus.DELIVERED)])
    assert summary.net_profit == Decimal("-30")


def test_unit_cost_lookup() -> None:
    assert unit_cost("Infinity") == Decimal("250")
    assert unit_cost("INFINITY azul") == Decimal("250")
    assert unit_cost("Kit fw pro 2") == Decimal("430")
    assert unit_cost("Fone") == 0


def test_partitions_keep_input_order_and_counts() -> None:
    sales = [
        _sale("1", "A", "1", SaleStatus.DELIVERED),
        _sale("2", "B", "1", SaleStatus.PENDING),
        _sale("3", "C", "1", SaleStatus.DELIVERED),
    ]

    summary = summarize(sales)

    assert [s.sale_id for s in summary.delivered] == ["1", "3"]
    assert [s.sale_id for s in summary.pending] == ["2"]
    assert summary.counts_by_status[SaleStatus.DELIVERED] == 2
    assert summary.counts_by_status[SaleStatus.CANCELLED] == 0


def test_recent_delivered_is_last_five_newest_first() -> None:
    sales = [_sale(str(i), f"P{i}", "1", SaleStatus.DELIVERED) for i in range(7)]

    recent = summarize(sales).recent_delivered(5)

    assert [s.sale_id for s in recent] == ["6", "5", "4", "3", "2"]
