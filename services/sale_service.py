"""
Sale service for recording and editing sales.

Wraps a SaleRepository and runs post-commit hooks after every successful
create, update or delete. Hooks receive a SaleMutation describing what
changed. A failing hook is logged and never turns a committed write into a
failed request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional
from uuid import uuid4

from domain.sale import Sale, SaleStatus, normalize_buyer, to_amount
from repositories.sale_repository import SaleNotFoundError, SaleRepository

logger = logging.getLogger(__name__)


class MutationKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class SaleMutation:
    """A committed change to the ledger. `sale` is None for deletes."""
    kind: MutationKind
    sale_id: str
    sale: Optional[Sale] = None


PostCommitHook = Callable[[SaleMutation], Any]


class SaleService:
    """Ledger operations with post-commit notification hooks."""

    def __init__(self, repository: SaleRepository, hooks: Iterable[PostCommitHook] = ()):
        self.repository = repository
        self.hooks: List[PostCommitHook] = list(hooks)

    def add_hook(self, hook: PostCommitHook) -> None:
        self.hooks.append(hook)

    def _after_commit(self, mutation: SaleMutation) -> None:
        for hook in self.hooks:
            try:
                hook(mutation)
            except Exception:
                logger.exception(
                    "Post-commit hook failed after %s of sale %s",
                    mutation.kind.value,
                    mutation.sale_id,
                )

    def list_sales(self) -> List[Sale]:
        return self.repository.list_sales()

    def create_sale(
        self,
        name: str,
        value: Any,
        buyer: Optional[str] = None,
        status: SaleStatus = SaleStatus.PENDING,
    ) -> Sale:
        """
        Record a new sale and notify hooks.

        Raises:
            ValueError: If name is blank or value is invalid
            RepositoryError: If the store write fails (hooks are not run)
        """
        sale = Sale(
            sale_id=str(uuid4()),
            name=name.strip() if name else name,
            value=to_amount(value),
            buyer=normalize_buyer(buyer),
            status=SaleStatus(status),
        )
        stored = self.repository.create_sale(sale)
        self._after_commit(SaleMutation(MutationKind.CREATED, stored.sale_id, stored))
        return stored

    def update_sale(
        self,
        sale_id: str,
        *,
        name: Optional[str] = None,
        value: Any = None,
        buyer: Optional[str] = None,
        status: Optional[SaleStatus] = None,
    ) -> Sale:
        """
        Apply a partial update (fields left as None are unchanged).

        Raises:
            SaleNotFoundError: If the sale does not exist
        """
        current = self.repository.get_sale(sale_id)
        if current is None:
            raise SaleNotFoundError(sale_id)

        changed = current.with_changes(name=name, value=value, buyer=buyer, status=status)
        stored = self.repository.update_sale(changed)
        self._after_commit(SaleMutation(MutationKind.UPDATED, stored.sale_id, stored))
        return stored

    def delete_sale(self, sale_id: str) -> None:
        """
        Remove a sale.

        Raises:
            SaleNotFoundError: If the sale does not exist
        """
        self.repository.delete_sale(sale_id)
        self._after_commit(SaleMutation(MutationKind.DELETED, sale_id))


__all__ = ["MutationKind", "PostCommitHook", "SaleMutation", "SaleService"]
