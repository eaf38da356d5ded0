"""Application service: Show Product Versions use case (query)."""

from __future__ import annotations

from catalog.domain.model.product import Product
from catalog.domain.repository.order_item_repository import OrderItemRepository
from catalog.domain.repository.product_repository import ProductRepository
from catalog.domain.service.versioning_service import VersioningService


class ShowProductVersionsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        order_item_repo: OrderItemRepository,
    ) -> None:
        self._versioning = VersioningService(product_repo, order_item_repo)

    def handle(self, product_id: str) -> list[tuple[Product, bool]]:
        """Every version of the lineage, each paired with its "in orders" flag."""
        return [
            (p, self._versioning.is_product_in_orders(p.id))
            for p in self._versioning.get_product_versions(product_id)
        ]
