"""Immutable order-line snapshots.

A snapshot is written once at checkout and is the permanent record of
what was sold: product identity, the materialized component tree and
every price figure. Nothing in it is ever re-derived from the live
catalog, so later catalog edits cannot change an existing order.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone

from catalog.domain.model.value_objects import Money


@dataclass(frozen=True)
class ComponentSnapshot:
    component_id: str
    sku: str
    name: str
    version: int
    quantity: int
    price: Money  # resolved unit price at capture time
    is_included: bool
    is_required: bool
    components: tuple[ComponentSnapshot, ...] = ()

    @property
    def children(self) -> tuple[ComponentSnapshot, ...]:
        return self.components

    @property
    def line_price(self) -> Money:
        return self.price * self.quantity

    def walk(self) -> Iterator[ComponentSnapshot]:
        """Yield this node and every node below it, depth first."""
        yield self
        for child in self.components:
            yield from child.walk()


@dataclass(frozen=True)
class OrderItemSnapshot:
    product_id: str
    product_sku: str
    product_slug: str
    product_name: str
    product_version: int
    product_type: str
    product_image: str
    component_tree: tuple[ComponentSnapshot, ...]
    quantity: int
    base_price: Money
    included_components_price: Money
    optional_components_price: Money
    price: Money  # per unit: base + included + optional
    line_total: Money
    current_product_id: str
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def included_components(self) -> tuple[ComponentSnapshot, ...]:
        return tuple(c for c in self.component_tree if c.is_included)

    @property
    def optional_components(self) -> tuple[ComponentSnapshot, ...]:
        return tuple(c for c in self.component_tree if not c.is_included)

    def references(self, product_id: str) -> bool:
        """True if *product_id* is the ordered product or any captured component."""
        if self.current_product_id == product_id:
            return True
        return any(
            node.component_id == product_id
            for top in self.component_tree
            for node in top.walk()
        )


@dataclass(frozen=True)
class LineItemRequest:
    """One requested order line: which product row and how many."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class OrderLine:
    """A persisted order line: the owning order plus its frozen snapshot."""

    order_id: str
    snapshot: OrderItemSnapshot


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Money
    item_count: int


@dataclass(frozen=True)
class AvailabilityResult:
    unavailable: tuple[str, ...]

    @property
    def valid(self) -> bool:
        return not self.unavailable
