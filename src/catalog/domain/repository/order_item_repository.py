"""Abstract repository for persisted order lines and their snapshots.

Order lines are append-only: there is deliberately no update or delete.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from catalog.domain.model.snapshot import OrderLine


class OrderItemRepository(ABC):

    @abstractmethod
    def next_order_id(self) -> str:
        """Generate the next unique order ID."""

    @abstractmethod
    def add(self, line: OrderLine) -> None:
        """Append an order line."""

    @abstractmethod
    def list_by_order(self, order_id: str) -> list[OrderLine]:
        """Return the lines of an order in insertion order."""

    @abstractmethod
    def is_product_referenced(self, product_id: str) -> bool:
        """True if any line captured *product_id*, as product or component."""
