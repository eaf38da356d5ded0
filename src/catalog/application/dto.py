"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI (or any other caller) and the
application layer without exposing domain internals. Money is always
pre-formatted for display.
"""

from __future__ import annotations

from dataclasses import dataclass

from catalog.domain.model.product import Product
from catalog.domain.model.snapshot import OrderItemSnapshot, OrderTotals


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one requested line (product row ID + quantity)."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class ProductUpdateResult:
    """Output of an admin edit: the row now holding the edit.

    ``versioned`` is True when the edit forked a new version instead of
    changing the original row.
    """

    product: Product
    versioned: bool


@dataclass(frozen=True)
class ComponentTreeNodeDTO:
    component_id: str
    sku: str
    name: str
    version: int
    quantity: int
    unit_price: str
    line_price: str
    is_included: bool
    is_required: bool
    is_shared: bool
    sort_order: int
    children: tuple[ComponentTreeNodeDTO, ...]


@dataclass(frozen=True)
class PriceBreakdownDTO:
    product_id: str
    base_price: str
    included_price: str
    optional_price: str
    components_total: str
    unit_price: str  # base + both component groups


@dataclass(frozen=True)
class OrderLineDTO:
    product_id: str
    product_name: str
    product_version: int
    quantity: int
    unit_price: str
    line_total: str
    component_count: int


@dataclass(frozen=True)
class OrderDTO:
    """Output: an order as persisted, with its frozen lines and totals."""

    order_id: str
    lines: list[OrderLineDTO]
    subtotal: str
    item_count: int


def order_dto(order_id: str, snapshots: list[OrderItemSnapshot], totals: OrderTotals) -> OrderDTO:
    return OrderDTO(
        order_id=order_id,
        lines=[
            OrderLineDTO(
                product_id=s.product_id,
                product_name=s.product_name,
                product_version=s.product_version,
                quantity=s.quantity,
                unit_price=str(s.price),
                line_total=str(s.line_total),
                component_count=sum(1 for top in s.component_tree for _ in top.walk()),
            )
            for s in snapshots
        ],
        subtotal=str(totals.subtotal),
        item_count=totals.item_count,
    )
