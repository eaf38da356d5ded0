"""Abstract repository for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from catalog.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product row by its ID, or None if not found."""

    @abstractmethod
    def get_many(self, product_ids: Iterable[str]) -> dict[str, Product]:
        """Batch lookup. Missing IDs are simply absent from the result."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Product | None:
        """Return the product row using *slug*, or None."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Product | None:
        """Return the product row using *sku*, or None."""

    @abstractmethod
    def get_successor(self, product_id: str) -> Product | None:
        """Return the row forked from *product_id*, if one exists."""

    @abstractmethod
    def list_lineage(self, base_product_id: str) -> list[Product]:
        """Return every version of a lineage, ordered by version."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product row in the catalog."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product row."""

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove a product row. Callers check existence first."""
