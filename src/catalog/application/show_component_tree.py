"""Application service: Show Component Tree use case (query)."""

from __future__ import annotations

from catalog.application.dto import ComponentTreeNodeDTO
from catalog.domain.model.component import ComponentTreeNode
from catalog.domain.repository.component_repository import ComponentRepository
from catalog.domain.repository.product_repository import ProductRepository
from catalog.domain.service.component_graph_service import ComponentGraphService


class ShowComponentTreeHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        component_repo: ComponentRepository,
    ) -> None:
        self._graph = ComponentGraphService(product_repo, component_repo)

    def handle(self, product_id: str, max_depth: int | None = None) -> list[ComponentTreeNodeDTO]:
        tree = self._graph.get_component_tree(product_id, max_depth=max_depth)
        return [self._to_dto(node) for node in tree]

    @classmethod
    def _to_dto(cls, node: ComponentTreeNode) -> ComponentTreeNodeDTO:
        return ComponentTreeNodeDTO(
            component_id=node.component.id,
            sku=node.component.sku,
            name=node.display_name,
            version=node.component.version,
            quantity=node.edge.quantity,
            unit_price=str(node.unit_price),
            line_price=str(node.line_price),
            is_included=node.edge.is_included,
            is_required=node.edge.is_required,
            is_shared=node.is_shared,
            sort_order=node.edge.sort_order,
            children=tuple(cls._to_dto(child) for child in node.children),
        )
