"""Application services: add, remove and update component edges.

Each runs in one transaction that locks both ends of the edge, so the
cycle check and the write it guards see the same graph.
"""

from __future__ import annotations

from catalog.domain.model.component import ComponentEdge, ComponentPatch
from catalog.domain.model.value_objects import Money
from catalog.domain.repository.unit_of_work import UnitOfWork
from catalog.domain.service.component_graph_service import ComponentGraphService


class AddComponentHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        parent_id: str,
        component_id: str,
        quantity: int = 1,
        is_required: bool = True,
        is_included: bool = True,
        price_override: str | None = None,
        display_name: str | None = None,
        sort_order: int = 0,
    ) -> ComponentEdge:
        override = Money.of(price_override) if price_override is not None else None
        with self._uow:
            self._uow.lock_products(parent_id, component_id)
            graph = ComponentGraphService(self._uow.products, self._uow.components)
            edge = graph.add_component(
                parent_id,
                component_id,
                quantity=quantity,
                is_required=is_required,
                is_included=is_included,
                price_override=override,
                display_name=display_name,
                sort_order=sort_order,
            )
            self._uow.commit()
        return edge


class RemoveComponentHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, parent_id: str, component_id: str) -> None:
        with self._uow:
            self._uow.lock_products(parent_id, component_id)
            graph = ComponentGraphService(self._uow.products, self._uow.components)
            graph.remove_component(parent_id, component_id)
            self._uow.commit()


class UpdateComponentHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, parent_id: str, component_id: str, patch: ComponentPatch) -> ComponentEdge:
        with self._uow:
            self._uow.lock_products(parent_id, component_id)
            graph = ComponentGraphService(self._uow.products, self._uow.components)
            edge = graph.update_component(parent_id, component_id, patch)
            self._uow.commit()
        return edge
