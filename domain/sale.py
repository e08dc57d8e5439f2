"""
Domain: Sale entity.

A Sale is one transaction tracked by the ledger. Sales are created by the
record store, edited field-by-field (name, value, buyer, status) and removed
on delete. The notification engine only ever reads snapshots of them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional

from .time import parse_utc_timestamp, require_utc_timestamp

# Stored when a sale is submitted without a buyer.
DEFAULT_BUYER: str = "Não informado"


class SaleStatus(str, Enum):
    PENDING = "pending"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


def to_amount(value: Any) -> Decimal:
    """
    Convert a submitted monetary value to Decimal.

    Floats go through str() so 0.1 stays Decimal("0.1").

    Raises:
        ValueError: If the value is not a finite, non-negative number
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid monetary value: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"Invalid monetary value: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"Invalid monetary value: {value!r}")
    if amount < 0:
        raise ValueError(f"Monetary value must be non-negative, got {amount}")
    return amount


def normalize_buyer(buyer: Optional[str]) -> str:
    """Return the buyer label, or DEFAULT_BUYER when missing or blank."""
    if buyer is None or not buyer.strip():
        return DEFAULT_BUYER
    return buyer.strip()


@dataclass(frozen=True, slots=True)
class Sale:
    """
    Immutable snapshot of a sale.

    created_at is assigned by the store and only used for ordering.
    """

    sale_id: str
    name: str
    value: Decimal
    buyer: str = DEFAULT_BUYER
    status: SaleStatus = SaleStatus.PENDING
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.sale_id:
            raise ValueError("sale_id must be a non-empty string")
        if not self.name or not self.name.strip():
            raise ValueError("name must be a non-empty string")
        object.__setattr__(self, "value", to_amount(self.value))
        object.__setattr__(self, "status", SaleStatus(self.status))
        if self.created_at is not None:
            require_utc_timestamp("created_at", self.created_at)

    def with_changes(
        self,
        *,
        name: Optional[str] = None,
        value: Any = None,
        buyer: Optional[str] = None,
        status: Optional[SaleStatus] = None,
    ) -> "Sale":
        """
        Return a copy with the given fields replaced.

        Fields left as None keep their current value. A blank buyer resets to
        DEFAULT_BUYER.
        """
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if value is not None:
            changes["value"] = to_amount(value)
        if buyer is not None:
            changes["buyer"] = normalize_buyer(buyer)
        if status is not None:
            changes["status"] = SaleStatus(status)
        return replace(self, **changes) if changes else self

    def to_record(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly mapping (value kept as a string)."""
        return {
            "id": self.sale_id,
            "name": self.name,
            "value": str(self.value),
            "buyer": self.buyer,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @staticmethod
    def from_record(row: Mapping[str, Any]) -> "Sale":
        """Build a Sale from a stored mapping (JSON file row or database row)."""
        created_at = row.get("created_at")
        return Sale(
            sale_id=str(row["id"]),
            name=str(row["name"]),
            value=to_amount(row["value"]),
            buyer=normalize_buyer(row.get("buyer")),
            status=SaleStatus(row.get("status") or SaleStatus.PENDING.value),
            created_at=parse_utc_timestamp(created_at) if created_at else None,
        )
