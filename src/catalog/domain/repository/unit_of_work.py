"""Transaction boundary for check-then-act operations.

A unit of work groups the repositories that one use case touches and
makes their writes atomic: either ``commit()`` is reached and every
write sticks, or the block is left early and everything is undone.

Usage::

    with uow:
        uow.lock_product(product_id)
        ...
        uow.commit()

Leaving the block without ``commit()`` rolls back. ``lock_product``
serializes concurrent writers on one product row for the rest of the
transaction (``SELECT ... FOR UPDATE`` in a relational store).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from catalog.domain.repository.component_repository import ComponentRepository
from catalog.domain.repository.order_item_repository import OrderItemRepository
from catalog.domain.repository.product_repository import ProductRepository


class UnitOfWork(ABC):

    products: ProductRepository
    components: ComponentRepository
    order_items: OrderItemRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # No-op after a successful commit.
        self.rollback()

    def lock_products(self, *product_ids: str) -> None:
        """Lock several rows in a stable order to avoid lock-order deadlocks."""
        for product_id in sorted(set(product_ids)):
            self.lock_product(product_id)

    @abstractmethod
    def lock_product(self, product_id: str) -> None:
        """Hold a write lock on the product row until the transaction ends."""

    @abstractmethod
    def commit(self) -> None:
        """Make every write since the block was entered durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every uncommitted write."""
