"""Domain service: order-line snapshots and availability checks.

At checkout the live product and its component tree are copied into a
frozen ``OrderItemSnapshot``. Only a fixed number of levels below the
product are materialized (two by default, the depth existing order
history was captured with); anything deeper is neither stored nor priced.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from catalog.domain.exceptions import EntityNotFoundError, ValidationError
from catalog.domain.model.component import ComponentTreeNode
from catalog.domain.model.pricing import calculate_breakdown
from catalog.domain.model.snapshot import (
    AvailabilityResult,
    ComponentSnapshot,
    LineItemRequest,
    OrderItemSnapshot,
    OrderTotals,
)
from catalog.domain.model.value_objects import Money, Quantity
from catalog.domain.repository.product_repository import ProductRepository
from catalog.domain.service.component_graph_service import ComponentGraphService

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_DEPTH = 2


class SnapshotService:

    def __init__(
        self,
        product_repo: ProductRepository,
        graph: ComponentGraphService,
        depth: int = DEFAULT_SNAPSHOT_DEPTH,
    ) -> None:
        if depth < 1:
            raise ValidationError(f"Snapshot depth must be at least 1, got {depth}")
        self._product_repo = product_repo
        self._graph = graph
        self._depth = depth

    def validate_products_available(self, product_ids: Iterable[str]) -> AvailabilityResult:
        """Report every id that is missing or not currently purchasable.

        The result keeps the order of *product_ids*.
        """
        ids = list(product_ids)
        found = self._product_repo.get_many(ids)
        unavailable = tuple(
            pid for pid in ids
            if pid not in found or not found[pid].is_purchasable
        )
        if unavailable:
            logger.debug("Unavailable products: %s", ", ".join(unavailable))
        return AvailabilityResult(unavailable=unavailable)

    def create_order_item_snapshot(self, product_id: str, quantity: int) -> OrderItemSnapshot:
        """Freeze *product_id* and its priced component tree for one order line.

        ``price`` adds both the included and the optional component totals
        to the base price.
        """
        Quantity(quantity)
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product not found: {product_id!r}")

        tree = self._graph.get_component_tree(
            product.id, max_depth=self._depth, mark_shared=False
        )
        component_tree = tuple(_freeze(node) for node in tree)
        breakdown = calculate_breakdown(component_tree)
        price = product.price + breakdown.included_price + breakdown.optional_price

        snapshot = OrderItemSnapshot(
            product_id=product.id,
            product_sku=product.sku,
            product_slug=product.slug,
            product_name=product.name,
            product_version=product.version,
            product_type=product.product_type.value,
            product_image=product.primary_image_url,
            component_tree=component_tree,
            quantity=quantity,
            base_price=product.price,
            included_components_price=breakdown.included_price,
            optional_components_price=breakdown.optional_price,
            price=price,
            line_total=price * quantity,
            current_product_id=product.id,
        )
        logger.debug("Snapshot of %s x%d: %s", product.id, quantity, snapshot.line_total)
        return snapshot

    def create_order_item_snapshots(
        self, items: Iterable[LineItemRequest]
    ) -> list[OrderItemSnapshot]:
        return [
            self.create_order_item_snapshot(item.product_id, item.quantity)
            for item in items
        ]

    @staticmethod
    def calculate_order_totals(snapshots: Iterable[OrderItemSnapshot]) -> OrderTotals:
        subtotal = Money.zero()
        item_count = 0
        for snapshot in snapshots:
            subtotal = subtotal + snapshot.line_total
            item_count += snapshot.quantity
        return OrderTotals(subtotal=subtotal, item_count=item_count)


def _freeze(node: ComponentTreeNode) -> ComponentSnapshot:
    return ComponentSnapshot(
        component_id=node.component.id,
        sku=node.component.sku,
        name=node.display_name,
        version=node.component.version,
        quantity=node.edge.quantity,
        price=node.unit_price,
        is_included=node.edge.is_included,
        is_required=node.edge.is_required,
        components=tuple(_freeze(child) for child in node.children),
    )
