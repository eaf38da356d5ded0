"""Domain service: Component Graph.

Owns the parent -> component edges between products. The one invariant
that cannot live on a single edge is acyclicity: a product may never be,
directly or through any chain of edges, a component of itself. Every
insert therefore walks the descendants of the would-be component first.

Mutating calls are check-then-act; callers run them inside a unit of
work holding locks on the affected product rows.
"""

from __future__ import annotations

import logging

from catalog.domain.exceptions import EntityNotFoundError, ValidationError
from catalog.domain.model.component import (
    ComponentEdge,
    ComponentPatch,
    ComponentTreeNode,
    sort_edges,
)
from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import Money
from catalog.domain.repository.component_repository import ComponentRepository
from catalog.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class ComponentGraphService:

    def __init__(
        self,
        product_repo: ProductRepository,
        component_repo: ComponentRepository,
    ) -> None:
        self._product_repo = product_repo
        self._component_repo = component_repo

    # --- Mutations ------------------------------------------------------------

    def add_component(
        self,
        parent_id: str,
        component_id: str,
        quantity: int = 1,
        is_required: bool = True,
        is_included: bool = True,
        price_override: Money | None = None,
        display_name: str | None = None,
        sort_order: int = 0,
    ) -> ComponentEdge:
        """Attach *component_id* under *parent_id* and return the new edge."""
        if parent_id == component_id:
            raise ValidationError(
                f"Product {parent_id!r} cannot be a component of itself"
            )
        self._require_product(parent_id, "Parent product")
        self._require_product(component_id, "Component product")

        if self._component_repo.get(parent_id, component_id) is not None:
            raise ValidationError(
                f"Product {component_id!r} is already a component of {parent_id!r}"
            )
        if self.would_create_cycle(parent_id, component_id):
            logger.warning(
                "Rejected edge %s -> %s: circular reference", parent_id, component_id
            )
            raise ValidationError(
                f"Cannot add component: would create circular reference "
                f"({component_id} -> {parent_id})"
            )

        edge = ComponentEdge.create(
            parent_product_id=parent_id,
            component_product_id=component_id,
            quantity=quantity,
            is_required=is_required,
            is_included=is_included,
            price_override=price_override,
            display_name=display_name,
            sort_order=sort_order,
        )
        self._component_repo.save(edge)
        logger.info(
            "Added component %s to %s (qty=%d, included=%s)",
            component_id, parent_id, quantity, is_included,
        )
        return edge

    def remove_component(self, parent_id: str, component_id: str) -> None:
        """Delete the edge. Removing an edge that is already gone fails."""
        self._require_edge(parent_id, component_id)
        self._component_repo.delete(parent_id, component_id)
        logger.info("Removed component %s from %s", component_id, parent_id)

    def update_component(
        self,
        parent_id: str,
        component_id: str,
        patch: ComponentPatch,
    ) -> ComponentEdge:
        edge = self._require_edge(parent_id, component_id)
        edge.apply_patch(patch)
        self._component_repo.save(edge)
        logger.info("Updated component %s of %s", component_id, parent_id)
        return edge

    # --- Queries --------------------------------------------------------------

    def would_create_cycle(self, parent_id: str, component_id: str) -> bool:
        """True if *parent_id* is reachable from *component_id*.

        Iterative depth-first walk over the component's own descendants,
        to any depth. The existing graph is acyclic, so the walk ends;
        ``visited`` keeps shared sub-components from being expanded twice.
        """
        if parent_id == component_id:
            return True
        stack = [component_id]
        visited: set[str] = set()
        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)
            for edge in self._component_repo.list_children(current):
                if edge.component_product_id == parent_id:
                    return True
                stack.append(edge.component_product_id)
        return False

    def get_component_tree(
        self,
        parent_id: str,
        max_depth: int | None = None,
        *,
        mark_shared: bool = True,
    ) -> list[ComponentTreeNode]:
        """Resolve the subgraph below *parent_id* into nested nodes.

        ``max_depth=None`` resolves every level; ``1`` returns only the
        direct components. ``is_shared`` is set when the component also
        hangs under some other parent anywhere in the graph.
        """
        if max_depth is not None and max_depth < 1:
            raise ValidationError(f"Tree depth must be at least 1, got {max_depth}")
        self._require_product(parent_id, "Product")
        logger.debug("Resolving component tree of %s (max_depth=%s)", parent_id, max_depth)
        return self._resolve(parent_id, max_depth, mark_shared, path=(parent_id,))

    def get_direct_components(self, parent_id: str) -> list[ComponentTreeNode]:
        return self.get_component_tree(parent_id, max_depth=1)

    def get_parent_products(self, component_id: str) -> list[Product]:
        """Products that use *component_id* directly."""
        self._require_product(component_id, "Component product")
        parent_ids = [e.parent_product_id for e in self._component_repo.list_parents(component_id)]
        found = self._product_repo.get_many(parent_ids)
        return [found[pid] for pid in parent_ids if pid in found]

    # --- Internal helpers -----------------------------------------------------

    def _resolve(
        self,
        parent_id: str,
        levels_left: int | None,
        mark_shared: bool,
        path: tuple[str, ...],
    ) -> list[ComponentTreeNode]:
        edges = sort_edges(self._component_repo.list_children(parent_id))
        components = self._product_repo.get_many(e.component_product_id for e in edges)
        nodes: list[ComponentTreeNode] = []
        for edge in edges:
            component = components.get(edge.component_product_id)
            if component is None:
                # Dangling edge: the component row is gone.
                continue
            if component.id in path:
                raise ValidationError(
                    f"Component graph contains a cycle through {component.id!r}"
                )
            children: list[ComponentTreeNode] = []
            if levels_left is None or levels_left > 1:
                children = self._resolve(
                    component.id,
                    None if levels_left is None else levels_left - 1,
                    mark_shared,
                    path + (component.id,),
                )
            is_shared = mark_shared and self._component_repo.has_parent_other_than(
                component.id, parent_id
            )
            nodes.append(
                ComponentTreeNode(
                    component=component,
                    edge=edge,
                    is_shared=is_shared,
                    children=tuple(children),
                )
            )
        return nodes

    def _require_product(self, product_id: str, label: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"{label} not found: {product_id!r}")
        return product

    def _require_edge(self, parent_id: str, component_id: str) -> ComponentEdge:
        edge = self._component_repo.get(parent_id, component_id)
        if edge is None:
            raise EntityNotFoundError(
                f"Component relationship not found: {parent_id!r} -> {component_id!r}"
            )
        return edge
