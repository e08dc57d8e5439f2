"""
Webhook payload builder.

Turns a ledger summary and its rendered tables into the Discord embed that
mirrors the sales dashboard. Pure: identical inputs and timestamp always give
an identical payload.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Sequence
from zoneinfo import ZoneInfo

from domain.sale import Sale
from domain.summary import SalesSummary, summarize
from domain.time import require_utc_timestamp
from services.table_formatter import format_amount, format_sales_table

EMBED_TITLE: str = "📊 Painel de Vendas"
EMBED_COLOR: int = 0x2B2D31
RECENT_DELIVERED_LIMIT: int = 5
DEFAULT_DISPLAY_TIMEZONE: str = "America/Sao_Paulo"


def format_local_timestamp(generated_at: datetime, tz: ZoneInfo) -> str:
    """Human-readable local time, e.g. '18/10/2026, 14:05:09'."""
    return generated_at.astimezone(tz).strftime("%d/%m/%Y, %H:%M:%S")


def build_embed(
    summary: SalesSummary,
    pending_table: str,
    delivered_table: str,
    generated_at: datetime,
    tz: ZoneInfo,
) -> dict[str, Any]:
    """
    Assemble the dashboard embed.

    Args:
        summary: Aggregates for the full ledger
        pending_table: Rendered table of pending sales
        delivered_table: Rendered table of the most recent delivered sales
        generated_at: UTC generation time (footer and machine timestamp)
        tz: Timezone for the human-readable footer
    """
    require_utc_timestamp("generated_at", generated_at)

    description = (
        "**Resumo Financeiro**\n"
        f"💰 Total Geral: **R$ {format_amount(summary.total_revenue)}**\n"
        f"✅ Lucro Líquido (Entregues): **R$ {format_amount(summary.net_profit)}**\n"
        f"⏳ Em Aberto: **R$ {format_amount(summary.pending_revenue)}**"
    )

    return {
        "title": EMBED_TITLE,
        "color": EMBED_COLOR,
        "description": description,
        "fields": [
            {
                "name": f"⏳ Pendentes ({len(summary.pending)})",
                "value": pending_table,
                "inline": False,
            },
            {
                "name": f"✅ Últimas {RECENT_DELIVERED_LIMIT} Entregas",
                "value": delivered_table,
                "inline": False,
            },
        ],
        "footer": {
            "text": f"Última atualização: {format_local_timestamp(generated_at, tz)}",
        },
        "timestamp": generated_at.astimezone(timezone.utc).isoformat(),
    }


def build_sync_payload(
    sales: Sequence[Sale],
    generated_at: datetime,
    tz: ZoneInfo,
) -> dict[str, Any]:
    """
    Run Aggregator -> Formatter -> Builder for a ledger snapshot.

    Returns the webhook body: {"embeds": [embed]}.
    """
    summary = summarize(sales)
    pending_table = format_sales_table(summary.pending)
    delivered_table = format_sales_table(summary.recent_delivered(RECENT_DELIVERED_LIMIT))
    embed = build_embed(summary, pending_table, delivered_table, generated_at, tz)
    return {"embeds": [embed]}


__all__ = [
    "DEFAULT_DISPLAY_TIMEZONE",
    "EMBED_COLOR",
    "EMBED_TITLE",
    "RECENT_DELIVERED_LIMIT",
    "build_embed",
    "build_sync_payload",
    "format_local_timestamp",
]
