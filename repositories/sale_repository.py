"""
Sale repository (persistence).

This module provides *only* persistence operations for the Sale domain entity.
It does not trigger notifications; the sale service runs its post-commit hooks
after a write here succeeds.

Two backends share the SaleRepository interface:
- JsonSaleRepository: a single JSON file (default, no external services)
- SupabaseSaleRepository: the `sales` table in Supabase
"""

from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional

from postgrest.exceptions import APIError

from domain.sale import Sale
from domain.time import utc_now


# Supabase table name for sale records.
# Keep this aligned with your database schema.
_SALES_TABLE: str = "sales"


class RepositoryError(RuntimeError):
    """Raised when the backing store cannot be read or written."""
    pass


class SaleNotFoundError(RepositoryError):
    """Raised when an update or delete targets an unknown sale id."""

    def __init__(self, sale_id: str):
        super().__init__(f"Sale not found: {sale_id}")
        self.sale_id = sale_id


class SaleRepository(ABC):
    """Record store contract used by the sale service and the notifier."""

    @abstractmethod
    def list_sales(self) -> List[Sale]:
        """Return every sale, oldest first."""
        pass

    @abstractmethod
    def get_sale(self, sale_id: str) -> Optional[Sale]:
        """Return one sale, or None if it does not exist."""
        pass

    @abstractmethod
    def create_sale(self, sale: Sale) -> Sale:
        """Insert a sale. Assigns created_at when missing; returns the stored sale."""
        pass

    @abstractmethod
    def update_sale(self, sale: Sale) -> Sale:
        """Replace the stored name/value/buyer/status of an existing sale."""
        pass

    @abstractmethod
    def delete_sale(self, sale_id: str) -> None:
        """Remove a sale. Raises SaleNotFoundError if it does not exist."""
        pass


def write_json_atomic(path: Path, payload: Any) -> None:
    """Write JSON to `path` through a temp file so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class JsonSaleRepository(SaleRepository):
    """
    Sales stored as a JSON array in `<data_dir>/sales.json`.

    List order is insertion order. Every call re-reads the file, so writes are
    visible to the next read in the same process.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_rows(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                rows = json.load(fh)
        except json.JSONDecodeError as e:
            raise RepositoryError(f"Corrupt sales file {self.path}: {e}") from e
        if not isinstance(rows, list):
            raise RepositoryError(f"Corrupt sales file {self.path}: expected a JSON array")
        return rows

    def _write_rows(self, rows: list[dict[str, Any]]) -> None:
        try:
            write_json_atomic(self.path, rows)
        except OSError as e:
            raise RepositoryError(f"Failed to write sales file {self.path}: {e}") from e

    def list_sales(self) -> List[Sale]:
        return [Sale.from_record(row) for row in self._read_rows()]

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        for row in self._read_rows():
            if str(row.get("id")) == sale_id:
                return Sale.from_record(row)
        return None

    def create_sale(self, sale: Sale) -> Sale:
        rows = self._read_rows()
        if any(str(row.get("id")) == sale.sale_id for row in rows):
            raise RepositoryError(f"Duplicate sale id: {sale.sale_id}")

        stored = sale if sale.created_at is not None else _with_created_at(sale)
        rows.append(stored.to_record())
        self._write_rows(rows)
        return stored

    def update_sale(self, sale: Sale) -> Sale:
        rows = self._read_rows()
        for index, row in enumerate(rows):
            if str(row.get("id")) == sale.sale_id:
                current = Sale.from_record(row)
                # created_at belongs to the store and survives edits
                updated = Sale(
                    sale_id=current.sale_id,
                    name=sale.name,
                    value=sale.value,
                    buyer=sale.buyer,
                    status=sale.status,
                    created_at=current.created_at,
                )
                rows[index] = updated.to_record()
                self._write_rows(rows)
                return updated
        raise SaleNotFoundError(sale.sale_id)

    def delete_sale(self, sale_id: str) -> None:
        rows = self._read_rows()
        remaining = [row for row in rows if str(row.get("id")) != sale_id]
        if len(remaining) == len(rows):
            raise SaleNotFoundError(sale_id)
        self._write_rows(remaining)


def execute_query(query: Any, action: str) -> list[dict[str, Any]]:
    """
    Run a Supabase query and return its rows.

    supabase-py raises APIError for rejected requests (permissions, constraint
    violations, bad filters); it is re-raised as RepositoryError.
    """
    try:
        response = query.execute()
    except APIError as e:
        raise RepositoryError(f"Failed to {action}: {e.message or e}") from e
    return getattr(response, "data", None) or []


def _with_created_at(sale: Sale) -> Sale:
    return Sale(
        sale_id=sale.sale_id,
        name=sale.name,
        value=sale.value,
        buyer=sale.buyer,
        status=sale.status,
        created_at=utc_now(),
    )


class SupabaseSaleRepository(SaleRepository):
    """
    Sales stored in the Supabase `sales` table.

    Columns: id (text, pk), name, value (numeric), buyer, status,
    created_at (timestamptz). Listing is ordered by created_at ascending.
    """

    def __init__(self, client: Any, table: str = _SALES_TABLE):
        self.client = client
        self.table = table

    def list_sales(self) -> List[Sale]:
        query = (
            self.client.table(self.table)
            .select("*")
            .order("created_at", desc=False)
        )
        rows = execute_query(query, "list sales")
        return [Sale.from_record(row) for row in rows]

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        query = (
            self.client.table(self.table)
            .select("*")
            .eq("id", sale_id)
            .limit(1)
        )
        rows = execute_query(query, "fetch sale")
        if not rows:
            return None
        return Sale.from_record(rows[0])

    def create_sale(self, sale: Sale) -> Sale:
        stored = sale if sale.created_at is not None else _with_created_at(sale)
        execute_query(self.client.table(self.table).insert(stored.to_record()), "create sale")
        return stored

    def update_sale(self, sale: Sale) -> Sale:
        payload = {
            "name": sale.name,
            "value": str(sale.value),
            "buyer": sale.buyer,
            "status": sale.status.value,
        }
        query = (
            self.client.table(self.table)
            .update(payload)
            .eq("id", sale.sale_id)
        )
        rows = execute_query(query, "update sale")
        if not rows:
            raise SaleNotFoundError(sale.sale_id)
        return Sale.from_record(rows[0])

    def delete_sale(self, sale_id: str) -> None:
        rows = execute_query(self.client.table(self.table).delete().eq("id", sale_id), "delete sale")
        if not rows:
            raise SaleNotFoundError(sale_id)


__all__ = [
    "JsonSaleRepository",
    "RepositoryError",
    "SaleNotFoundError",
    "SaleRepository",
    "SupabaseSaleRepository",
    "execute_query",
    "write_json_atomic",
]
