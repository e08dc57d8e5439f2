"""
Domain: financial summary of the sales ledger (pure).

The summary is recomputed from the full sale collection on every sync and is
never cached.

Rules:
- total_revenue is the sum of every sale value, regardless of status.
- Each status has its own revenue subtotal; the three subtotals add up to
  total_revenue.
- net_profit only counts delivered sales, each contributing value minus the
  unit cost of its product.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Mapping, Sequence, Tuple

from .sale import Sale, SaleStatus

ZERO = Decimal("0.00")

# Unit cost per known product, matched by case-insensitive substring on the
# sale name. First match wins.
PRODUCT_COSTS: Tuple[Tuple[str, Decimal], ...] = (
    ("infinity", Decimal("250")),
    ("fw pro", Decimal("430")),
)

# Products offered by the dashboard form, with the price it pre-fills.
PRODUCT_CATALOG: Tuple[Tuple[str, Decimal], ...] = (
    ("Infinity", Decimal("500")),
    ("FW PRO", Decimal("800")),
)


def unit_cost(name: str, costs: Sequence[Tuple[str, Decimal]] = PRODUCT_COSTS) -> Decimal:
    """
    Look up the unit cost for a product name.

    Example:
        unit_cost("Infinity Blue")  # Decimal('250')
        unit_cost("Unknown")        # Decimal('0.00')
    """
    lowered = name.lower()
    for needle, cost in costs:
        if needle in lowered:
            return cost
    return ZERO


def _sum_values(sales: Iterable[Sale]) -> Decimal:
    return sum((sale.value for sale in sales), ZERO)


@dataclass(frozen=True, slots=True)
class SalesSummary:
    """
    Aggregate figures for a snapshot of the ledger.

    The status partitions keep the input order.
    """

    total_revenue: Decimal
    pending_revenue: Decimal
    delivered_revenue: Decimal
    cancelled_revenue: Decimal
    net_profit: Decimal
    pending: Tuple[Sale, ...] = ()
    delivered: Tuple[Sale, ...] = ()
    cancelled: Tuple[Sale, ...] = ()
    counts_by_status: Mapping[SaleStatus, int] = field(default_factory=dict)

    def recent_delivered(self, limit: int = 5) -> Tuple[Sale, ...]:
        """Last `limit` delivered sales, newest first."""
        if limit <= 0:
            return ()
        return tuple(reversed(self.delivered[-limit:]))


def summarize(
    sales: Sequence[Sale],
    costs: Sequence[Tuple[str, Decimal]] = PRODUCT_COSTS,
) -> SalesSummary:
    """
    Compute the financial summary for a list of sales.

    Never raises; an empty list yields zero sums and empty partitions.
    """
    partitions: dict[SaleStatus, list[Sale]] = {status: [] for status in SaleStatus}
    for sale in sales:
        partitions[sale.status].append(sale)

    delivered = partitions[SaleStatus.DELIVERED]
    net_profit = sum((sale.value - unit_cost(sale.name, costs) for sale in delivered), ZERO)

    return SalesSummary(
        total_revenue=_sum_values(sales),
        pending_revenue=_sum_values(partitions[SaleStatus.PENDING]),
        delivered_revenue=_sum_values(delivered),
        cancelled_revenue=_sum_values(partitions[SaleStatus.CANCELLED]),
        net_profit=net_profit,
        pending=tuple(partitions[SaleStatus.PENDING]),
        delivered=tuple(delivered),
        cancelled=tuple(partitions[SaleStatus.CANCELLED]),
        counts_by_status={status: len(items) for status, items in partitions.items()},
    )


__all__ = ["PRODUCT_CATALOG", "PRODUCT_COSTS", "SalesSummary", "summarize", "unit_cost"]
