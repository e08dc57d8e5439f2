"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
Monetary values are returned as strings with exactly two fraction digits.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from domain.sale import Sale, SaleStatus
from domain.summary import SalesSummary
from services.table_formatter import format_amount


# ============================================================================
# Sale Models
# ============================================================================

class SaleCreateRequest(BaseModel):
    """Request to record a new sale."""
    name: str = Field(..., min_length=1, description="Product or service sold")
    value: Decimal = Field(..., ge=0, description="Sale value")
    buyer: Optional[str] = Field(None, description="Buyer; defaults to 'Não informado'")
    status: SaleStatus = Field(SaleStatus.PENDING, description="pending, delivered or cancelled")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "FW PRO",
                "value": "800.00",
                "buyer": "Maria",
                "status": "pending"
            }
        }


class SaleUpdateRequest(BaseModel):
    """Partial update of a sale. Omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1)
    value: Optional[Decimal] = Field(None, ge=0)
    buyer: Optional[str] = None
    status: Optional[SaleStatus] = None

    class Config:
        json_schema_extra = {
            "example": {
                "status": "delivered"
            }
        }


class SaleResponse(BaseModel):
    """Single sale in API responses."""
    id: str
    name: str
    value: str
    buyer: str
    status: SaleStatus
    created_at: Optional[datetime] = None

    @classmethod
    def from_sale(cls, sale: Sale) -> "SaleResponse":
        return cls(
            id=sale.sale_id,
            name=sale.name,
            value=format_amount(sale.value),
            buyer=sale.buyer,
            status=sale.status,
            created_at=sale.created_at,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Infinity",
                "value": "500.00",
                "buyer": "João",
                "status": "delivered",
                "created_at": "2025-01-01T12:00:00Z"
            }
        }


class DeleteResponse(BaseModel):
    success: bool


# ============================================================================
# Summary Models
# ============================================================================

class SummaryResponse(BaseModel):
    """Aggregates shown on the dashboard."""
    total_revenue: str
    pending_revenue: str
    delivered_revenue: str
    cancelled_revenue: str
    net_profit: str
    counts_by_status: Dict[str, int]

    @classmethod
    def from_summary(cls, summary: SalesSummary) -> "SummaryResponse":
        return cls(
            total_revenue=format_amount(summary.total_revenue),
            pending_revenue=format_amount(summary.pending_revenue),
            delivered_revenue=format_amount(summary.delivered_revenue),
            cancelled_revenue=format_amount(summary.cancelled_revenue),
            net_profit=format_amount(summary.net_profit),
            counts_by_status={status.value: count for status, count in summary.counts_by_status.items()},
        )

    class Config:
        json_schema_extra = {
            "example": {
                "total_revenue": "1300.00",
                "pending_revenue": "800.00",
                "delivered_revenue": "500.00",
                "cancelled_revenue": "0.00",
                "net_profit": "250.00",
                "counts_by_status": {"pending": 1, "delivered": 1, "cancelled": 0}
            }
        }


class SyncResponse(BaseModel):
    """Result of a manual notification sync."""
    outcome: str
    tracking_message: bool
    error: Optional[str] = None


# ============================================================================
# Auth Models
# ============================================================================

class LoginRequest(BaseModel):
    password: str


class LoginResponse(BaseModel):
    success: bool


__all__ = [
    "DeleteResponse",
    "LoginRequest",
    "LoginResponse",
    "SaleCreateRequest",
    "SaleResponse",
    "SaleUpdateRequest",
    "SummaryResponse",
    "SyncResponse",
]
