"""JSON-file-backed implementation of OrderItemRepository.

Each row is one order line with its snapshot embedded verbatim, the way
an ``order_items`` table stores the serialized snapshot column.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from catalog.domain.model.snapshot import ComponentSnapshot, OrderItemSnapshot, OrderLine
from catalog.domain.model.value_objects import Money
from catalog.domain.repository.order_item_repository import OrderItemRepository
from catalog.infrastructure.persistence.json_file import JsonTable


class JsonOrderItemRepository(OrderItemRepository):

    def __init__(self, file_path: Path) -> None:
        self._table = JsonTable(file_path)

    @property
    def table(self) -> JsonTable:
        return self._table

    # --- OrderItemRepository interface ----------------------------------------

    def next_order_id(self) -> str:
        numeric = [int(r["order_id"]) for r in self._table.load() if r["order_id"].isdigit()]
        return str(max(numeric, default=0) + 1)

    def add(self, line: OrderLine) -> None:
        rows = self._table.load()
        rows.append(self._to_raw(line))
        self._table.persist(rows)

    def list_by_order(self, order_id: str) -> list[OrderLine]:
        return [self._to_domain(r) for r in self._table.load() if r["order_id"] == order_id]

    def is_product_referenced(self, product_id: str) -> bool:
        return any(
            self._to_domain(r).snapshot.references(product_id)
            for r in self._table.load()
        )

    # --- Serialization --------------------------------------------------------

    @classmethod
    def _to_raw(cls, line: OrderLine) -> dict:
        s = line.snapshot
        return {
            "order_id": line.order_id,
            "currency": s.price.currency,
            "snapshot": {
                "product_id": s.product_id,
                "product_sku": s.product_sku,
                "product_slug": s.product_slug,
                "product_name": s.product_name,
                "product_version": s.product_version,
                "product_type": s.product_type,
                "product_image": s.product_image,
                "component_tree": [cls._component_to_raw(c) for c in s.component_tree],
                "quantity": s.quantity,
                "base_price": str(s.base_price.amount),
                "included_components_price": str(s.included_components_price.amount),
                "optional_components_price": str(s.optional_components_price.amount),
                "price": str(s.price.amount),
                "line_total": str(s.line_total.amount),
                "current_product_id": s.current_product_id,
                "captured_at": s.captured_at.isoformat(),
            },
        }

    @classmethod
    def _component_to_raw(cls, c: ComponentSnapshot) -> dict:
        return {
            "component_id": c.component_id,
            "sku": c.sku,
            "name": c.name,
            "version": c.version,
            "quantity": c.quantity,
            "price": str(c.price.amount),
            "is_included": c.is_included,
            "is_required": c.is_required,
            "components": [cls._component_to_raw(sub) for sub in c.components],
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> OrderLine:
        currency = raw.get("currency", "USD")
        s = raw["snapshot"]

        def money(value: str) -> Money:
            return Money(Decimal(value), currency)

        snapshot = OrderItemSnapshot(
            product_id=s["product_id"],
            product_sku=s["product_sku"],
            product_slug=s["product_slug"],
            product_name=s["product_name"],
            product_version=s["product_version"],
            product_type=s["product_type"],
            product_image=s["product_image"],
            component_tree=tuple(
                cls._component_to_domain(c, currency) for c in s["component_tree"]
            ),
            quantity=s["quantity"],
            base_price=money(s["base_price"]),
            included_components_price=money(s["included_components_price"]),
            optional_components_price=money(s["optional_components_price"]),
            price=money(s["price"]),
            line_total=money(s["line_total"]),
            current_product_id=s["current_product_id"],
            captured_at=datetime.fromisoformat(s["captured_at"]),
        )
        return OrderLine(order_id=raw["order_id"], snapshot=snapshot)

    @classmethod
    def _component_to_domain(cls, raw: dict, currency: str) -> ComponentSnapshot:
        return ComponentSnapshot(
            component_id=raw["component_id"],
            sku=raw["sku"],
            name=raw["name"],
            version=raw["version"],
            quantity=raw["quantity"],
            price=Money(Decimal(raw["price"]), currency),
            is_included=raw["is_included"],
            is_required=raw["is_required"],
            components=tuple(
                cls._component_to_domain(sub, currency) for sub in raw.get("components", [])
            ),
        )
