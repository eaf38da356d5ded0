"""Application service: Create Order Items use case (checkout).

Steps, all inside one transaction:
1. Confirm every requested product is purchasable right now.
2. Snapshot each product with its priced component tree.
3. Persist one order line per snapshot.

The persisted snapshots are final. Nothing later re-reads the catalog
to recompute them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from catalog.application.dto import OrderItemSpec
from catalog.domain.exceptions import ConflictError, ValidationError
from catalog.domain.model.snapshot import (
    LineItemRequest,
    OrderItemSnapshot,
    OrderLine,
    OrderTotals,
)
from catalog.domain.repository.unit_of_work import UnitOfWork
from catalog.domain.service.component_graph_service import ComponentGraphService
from catalog.domain.service.snapshot_service import DEFAULT_SNAPSHOT_DEPTH, SnapshotService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    order_id: str
    snapshots: list[OrderItemSnapshot]
    totals: OrderTotals


class CreateOrderItemsHandler:

    def __init__(self, uow: UnitOfWork, snapshot_depth: int = DEFAULT_SNAPSHOT_DEPTH) -> None:
        self._uow = uow
        self._snapshot_depth = snapshot_depth

    def handle(self, item_specs: list[OrderItemSpec], order_id: str | None = None) -> CheckoutResult:
        if not item_specs:
            raise ValidationError("An order must contain at least one item")

        with self._uow:
            graph = ComponentGraphService(self._uow.products, self._uow.components)
            snapshots = SnapshotService(self._uow.products, graph, depth=self._snapshot_depth)

            availability = snapshots.validate_products_available(
                spec.product_id for spec in item_specs
            )
            if not availability.valid:
                raise ValidationError(
                    "Products not available for purchase: "
                    + ", ".join(availability.unavailable)
                )

            captured = snapshots.create_order_item_snapshots(
                LineItemRequest(spec.product_id, spec.quantity) for spec in item_specs
            )
            if order_id is None:
                order_id = self._uow.order_items.next_order_id()
            elif self._uow.order_items.list_by_order(order_id):
                raise ConflictError(f"Order {order_id!r} already has lines")
            for snapshot in captured:
                self._uow.order_items.add(OrderLine(order_id=order_id, snapshot=snapshot))

            self._uow.commit()

        totals = SnapshotService.calculate_order_totals(captured)
        logger.info(
            "Order %s: %d line(s), %d item(s), subtotal %s",
            order_id, len(captured), totals.item_count, totals.subtotal,
        )
        return CheckoutResult(order_id=order_id, snapshots=captured, totals=totals)
