"""JSON-file-backed implementation of ComponentRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from catalog.domain.model.component import ComponentEdge, sort_edges
from catalog.domain.model.value_objects import Money
from catalog.domain.repository.component_repository import ComponentRepository
from catalog.infrastructure.persistence.json_file import JsonTable


class JsonComponentRepository(ComponentRepository):

    def __init__(self, file_path: Path) -> None:
        self._table = JsonTable(file_path)

    @property
    def table(self) -> JsonTable:
        return self._table

    # --- ComponentRepository interface ----------------------------------------

    def get(self, parent_product_id: str, component_product_id: str) -> ComponentEdge | None:
        return self._load().get((parent_product_id, component_product_id))

    def list_children(self, parent_product_id: str) -> list[ComponentEdge]:
        return sort_edges(
            [e for e in self._load().values() if e.parent_product_id == parent_product_id]
        )

    def list_parents(self, component_product_id: str) -> list[ComponentEdge]:
        return [
            e for e in self._load().values()
            if e.component_product_id == component_product_id
        ]

    def has_parent_other_than(self, component_product_id: str, parent_product_id: str) -> bool:
        return any(
            e.component_product_id == component_product_id
            and e.parent_product_id != parent_product_id
            for e in self._load().values()
        )

    def save(self, edge: ComponentEdge) -> None:
        edges = self._load()
        edges[edge.key] = edge
        self._persist(edges)

    def delete(self, parent_product_id: str, component_product_id: str) -> None:
        edges = self._load()
        edges.pop((parent_product_id, component_product_id), None)
        self._persist(edges)

    # --- Serialization --------------------------------------------------------

    def _load(self) -> dict[tuple[str, str], ComponentEdge]:
        edges = (self._to_domain(raw) for raw in self._table.load())
        return {e.key: e for e in edges}

    def _persist(self, edges: dict[tuple[str, str], ComponentEdge]) -> None:
        self._table.persist([self._to_raw(e) for e in edges.values()])

    @staticmethod
    def _to_raw(e: ComponentEdge) -> dict:
        return {
            "parent_product_id": e.parent_product_id,
            "component_product_id": e.component_product_id,
            "quantity": e.quantity,
            "is_required": e.is_required,
            "is_included": e.is_included,
            "price_override": str(e.price_override.amount) if e.price_override is not None else None,
            "currency": e.price_override.currency if e.price_override is not None else "USD",
            "display_name": e.display_name,
            "sort_order": e.sort_order,
        }

    @staticmethod
    def _to_domain(raw: dict) -> ComponentEdge:
        override = raw.get("price_override")
        return ComponentEdge(
            parent_product_id=raw["parent_product_id"],
            component_product_id=raw["component_product_id"],
            quantity=raw.get("quantity", 1),
            is_required=raw.get("is_required", True),
            is_included=raw.get("is_included", True),
            price_override=(
                Money(Decimal(override), raw.get("currency", "USD"))
                if override is not None else None
            ),
            display_name=raw.get("display_name"),
            sort_order=raw.get("sort_order", 0),
        )
