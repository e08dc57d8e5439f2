"""
Fixed-width sale tables for the webhook message.

Discord renders the table inside a ```text code block, so columns line up in a
monospaced font. Truncation counts characters, not display width.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from domain.sale import Sale

EMPTY_TABLE_PLACEHOLDER: str = "Nenhum registro."
ELLIPSIS: str = "…"

# Longest text shown in a cell; longer text is cut to CELL_WIDTH - 1 + ELLIPSIS.
CELL_WIDTH: int = 13
# Cells are padded to COLUMN_WIDTH.
COLUMN_WIDTH: int = 15
VALUE_WIDTH: int = 8
CURRENCY_PREFIX: str = "R$"

_CENTS = Decimal("0.01")


def format_amount(value: Decimal) -> str:
    """
    Render a monetary value with exactly two fraction digits.

    Example:
        format_amount(Decimal("1300"))    # '1300.00'
        format_amount(Decimal("2.345"))   # '2.35'
    """
    return str(Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP))


def truncate_cell(text: str, width: int = CELL_WIDTH) -> str:
    """Cut text longer than `width` to `width - 1` characters plus an ellipsis."""
    if len(text) > width:
        return text[: width - 1] + ELLIPSIS
    return text


def _buyer_cell(buyer: Optional[str]) -> str:
    return buyer.strip() if buyer and buyer.strip() else "-"


def format_sale_row(sale: Sale) -> str:
    name = truncate_cell(sale.name).ljust(COLUMN_WIDTH)
    buyer = truncate_cell(_buyer_cell(sale.buyer)).ljust(COLUMN_WIDTH)
    value = format_amount(sale.value).rjust(VALUE_WIDTH)
    return f"{name} {buyer} {CURRENCY_PREFIX} {value}"


def format_sales_table(sales: Sequence[Sale]) -> str:
    """
    Render sales as a monospaced table wrapped in a ```text block.

    Rows keep the order of `sales`. An empty sequence yields
    EMPTY_TABLE_PLACEHOLDER instead of an empty table.
    """
    if not sales:
        return EMPTY_TABLE_PLACEHOLDER

    header = f"{'PRODUTO'.ljust(COLUMN_WIDTH)} {'COMPRADOR'.ljust(COLUMN_WIDTH)} VALOR"
    separator = f"{'-' * COLUMN_WIDTH} {'-' * COLUMN_WIDTH} {'-' * (VALUE_WIDTH + len(CURRENCY_PREFIX) + 1)}"
    rows = "\n".join(format_sale_row(sale) for sale in sales)

    return f"```text\n{header}\n{separator}\n{rows}\n```"


__all__ = [
    "CELL_WIDTH",
    "COLUMN_WIDTH",
    "ELLIPSIS",
    "EMPTY_TABLE_PLACEHOLDER",
    "format_amount",
    "format_sale_row",
    "format_sales_table",
    "truncate_cell",
]
