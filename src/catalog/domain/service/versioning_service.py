"""Domain service: product versioning and lifecycle.

Once any order line has captured a product row, that row is history.
Edits then go through ``create_product_version``, which writes a new row
with the next version number and leaves the old one untouched. Only
lifecycle changes (sunset, discontinue) may still touch an ordered row;
they never alter what a snapshot captured.

All mutating calls here are check-then-act. Callers hold a lock on the
source product row for the duration of the transaction, so two racing
edits cannot both decide "not ordered yet" or both fork a next version.
"""

from __future__ import annotations

import logging
from datetime import datetime

from catalog.domain.exceptions import ConflictError, EntityNotFoundError
from catalog.domain.model.product import Product, ProductPatch
from catalog.domain.repository.component_repository import ComponentRepository
from catalog.domain.repository.order_item_repository import OrderItemRepository
from catalog.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class VersioningService:

    def __init__(
        self,
        product_repo: ProductRepository,
        order_item_repo: OrderItemRepository,
        component_repo: ComponentRepository | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._order_item_repo = order_item_repo
        self._component_repo = component_repo

    def is_product_in_orders(self, product_id: str) -> bool:
        return self._order_item_repo.is_product_referenced(product_id)

    def create_product_version(self, product_id: str, patch: ProductPatch) -> Product:
        """Fork *product_id* into a new row carrying *patch*.

        Only meaningful for products already referenced by orders; the
        in-place path is ``update_product_in_place``. Raises
        ``ConflictError`` if the source already has a successor, which is
        how a second racing fork is turned away.
        """
        source = self._require(product_id)

        successor = self._product_repo.get_successor(source.id)
        if successor is not None:
            logger.warning(
                "Rejected fork of %s: already superseded by %s", source.id, successor.id
            )
            raise ConflictError(
                f"Product {source.id!r} already has a newer version {successor.id!r}; "
                f"edit that one instead"
            )

        forked = source.fork(patch)
        if self._product_repo.get_by_id(forked.id) is not None:
            raise ConflictError(f"Product id {forked.id!r} is already taken")
        self._assert_unique(forked)

        self._product_repo.save(forked)
        logger.info(
            "Forked %s v%d -> %s v%d", source.id, source.version, forked.id, forked.version
        )
        return forked

    def update_product_in_place(self, product_id: str, patch: ProductPatch) -> Product:
        """Edit a product row that no order has captured yet."""
        product = self._require(product_id)
        if self.is_product_in_orders(product.id):
            raise ConflictError(
                f"Product {product.id!r} is referenced by orders; "
                f"create a new version instead of editing it"
            )
        product.apply_patch(patch)
        self._assert_unique(product)
        self._product_repo.save(product)
        logger.info("Updated %s in place (version %d)", product.id, product.version)
        return product

    def sunset_product(
        self,
        product_id: str,
        reason: str,
        replacement_product_id: str | None = None,
        at: datetime | None = None,
    ) -> Product:
        product = self._require(product_id)
        if replacement_product_id is not None:
            self._require(replacement_product_id)
        product.sunset(reason, replacement_product_id, at=at)
        self._product_repo.save(product)
        logger.info(
            "Sunset %s (replacement=%s): %s",
            product.id, replacement_product_id, product.sunset_reason,
        )
        return product

    def discontinue_product(
        self,
        product_id: str,
        reason: str | None = None,
        at: datetime | None = None,
    ) -> Product:
        product = self._require(product_id)
        product.discontinue(reason, at=at)
        self._product_repo.save(product)
        logger.info("Discontinued %s", product.id)
        return product

    def delete_product(self, product_id: str) -> Product:
        """Remove a product nobody has ordered, with every edge touching it.

        Ordered rows are history and can only be sunset or discontinued.
        """
        if self._component_repo is None:
            raise RuntimeError("delete_product needs a component repository")
        product = self._require(product_id)
        if self.is_product_in_orders(product.id):
            raise ConflictError(
                f"Cannot delete product {product.id!r}: it is referenced by orders; "
                f"sunset it instead"
            )

        edges = self._component_repo.list_children(product.id)
        edges += self._component_repo.list_parents(product.id)
        for edge in edges:
            self._component_repo.delete(edge.parent_product_id, edge.component_product_id)
        self._product_repo.delete(product.id)
        logger.info("Deleted %s and %d component edge(s)", product.id, len(edges))
        return product

    def get_product_versions(self, product_id: str) -> list[Product]:
        """Every row in the lineage of *product_id*, oldest first."""
        product = self._require(product_id)
        return self._product_repo.list_lineage(product.lineage_id)

    def get_latest_version(self, product_id: str) -> Product:
        return self.get_product_versions(product_id)[-1]

    # --- Internal helpers -----------------------------------------------------

    def _require(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product not found: {product_id!r}")
        return product

    def _assert_unique(self, product: Product) -> None:
        by_slug = self._product_repo.get_by_slug(product.slug)
        if by_slug is not None and by_slug.id != product.id:
            raise ConflictError(f"Slug {product.slug!r} is already used by {by_slug.id!r}")
        by_sku = self._product_repo.get_by_sku(product.sku)
        # Free-form SKUs are carried unchanged across versions of one lineage.
        if by_sku is not None and by_sku.lineage_id != product.lineage_id:
            raise ConflictError(f"SKU {product.sku!r} is already used by {by_sku.id!r}")
