"""Application service: Show Order use case (query).

Reads the persisted snapshots only; the live catalog is never consulted.
"""

from __future__ import annotations

from catalog.application.dto import OrderDTO, order_dto
from catalog.domain.exceptions import EntityNotFoundError
from catalog.domain.repository.order_item_repository import OrderItemRepository
from catalog.domain.service.snapshot_service import SnapshotService


class ShowOrderHandler:

    def __init__(self, order_item_repo: OrderItemRepository) -> None:
        self._order_item_repo = order_item_repo

    def handle(self, order_id: str) -> OrderDTO:
        lines = self._order_item_repo.list_by_order(order_id)
        if not lines:
            raise EntityNotFoundError(f"Order {order_id!r} not found")
        snapshots = [line.snapshot for line in lines]
        return order_dto(order_id, snapshots, SnapshotService.calculate_order_totals(snapshots))
