"""Component relationships between products.

A ``ComponentEdge`` says "``component_product_id`` is a sub-part of
``parent_product_id``". All edges together must form a DAG; that
invariant spans many edges, so it is enforced by
``ComponentGraphService`` rather than here.
"""

from __future__ import annotations

from dataclasses import dataclass

from catalog.domain.exceptions import ValidationError
from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class ComponentPatch:
    """Partial update of an edge. ``None`` means "leave unchanged"."""

    quantity: int | None = None
    is_required: bool | None = None
    is_included: bool | None = None
    price_override: Money | None = None
    clear_price_override: bool = False
    display_name: str | None = None
    clear_display_name: bool = False
    sort_order: int | None = None

    def __post_init__(self) -> None:
        if self.clear_price_override and self.price_override is not None:
            raise ValidationError(
                "Cannot both set and clear the price override in one patch"
            )
        if self.clear_display_name and self.display_name is not None:
            raise ValidationError(
                "Cannot both set and clear the display name in one patch"
            )


@dataclass
class ComponentEdge:

    parent_product_id: str
    component_product_id: str
    quantity: int = 1
    is_required: bool = True
    is_included: bool = True
    price_override: Money | None = None
    display_name: str | None = None
    sort_order: int = 0

    @staticmethod
    def create(
        parent_product_id: str,
        component_product_id: str,
        quantity: int = 1,
        is_required: bool = True,
        is_included: bool = True,
        price_override: Money | None = None,
        display_name: str | None = None,
        sort_order: int = 0,
    ) -> ComponentEdge:
        if parent_product_id == component_product_id:
            raise ValidationError(
                f"Product {parent_product_id!r} cannot be a component of itself"
            )
        Quantity(quantity)
        _validate_sort_order(sort_order)
        return ComponentEdge(
            parent_product_id=parent_product_id,
            component_product_id=component_product_id,
            quantity=quantity,
            is_required=is_required,
            is_included=is_included,
            price_override=price_override,
            display_name=_clean_display_name(display_name),
            sort_order=sort_order,
        )

    @property
    def key(self) -> tuple[str, str]:
        return (self.parent_product_id, self.component_product_id)

    def unit_price_for(self, component: Product) -> Money:
        """Resolve ``price_override ?? component_price ?? price``."""
        if self.price_override is not None:
            return self.price_override
        return component.unit_price_as_component

    def label_for(self, component: Product) -> str:
        return self.display_name or component.name

    def apply_patch(self, patch: ComponentPatch) -> None:
        # Validate everything first so a bad patch leaves the edge untouched.
        if patch.quantity is not None:
            Quantity(patch.quantity)
        if patch.sort_order is not None:
            _validate_sort_order(patch.sort_order)

        if patch.quantity is not None:
            self.quantity = patch.quantity
        if patch.is_required is not None:
            self.is_required = patch.is_required
        if patch.is_included is not None:
            self.is_included = patch.is_included
        if patch.price_override is not None:
            self.price_override = patch.price_override
        elif patch.clear_price_override:
            self.price_override = None
        if patch.display_name is not None:
            self.display_name = _clean_display_name(patch.display_name)
        elif patch.clear_display_name:
            self.display_name = None
        if patch.sort_order is not None:
            self.sort_order = patch.sort_order


@dataclass(frozen=True)
class ComponentTreeNode:
    """One resolved edge of a live component tree."""

    component: Product
    edge: ComponentEdge
    is_shared: bool
    children: tuple[ComponentTreeNode, ...] = ()

    @property
    def is_included(self) -> bool:
        return self.edge.is_included

    @property
    def unit_price(self) -> Money:
        return self.edge.unit_price_for(self.component)

    @property
    def line_price(self) -> Money:
        return self.unit_price * self.edge.quantity

    @property
    def display_name(self) -> str:
        return self.edge.label_for(self.component)

    @property
    def depth(self) -> int:
        """Number of levels in this subtree, counting this node."""
        return 1 + max((child.depth for child in self.children), default=0)


def sort_edges(edges: list[ComponentEdge]) -> list[ComponentEdge]:
    return sorted(edges, key=lambda e: (e.sort_order, e.component_product_id))


def _validate_sort_order(sort_order: int) -> None:
    if not isinstance(sort_order, int) or isinstance(sort_order, bool):
        raise ValidationError(
            f"Sort order must be an integer, got {type(sort_order).__name__}"
        )


def _clean_display_name(display_name: str | None) -> str | None:
    if display_name is None:
        return None
    return display_name.strip() or None
