"""Abstract repository for component edges (the ``product_components`` table)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from catalog.domain.model.component import ComponentEdge


class ComponentRepository(ABC):

    @abstractmethod
    def get(self, parent_product_id: str, component_product_id: str) -> ComponentEdge | None:
        """Return the edge between two products, or None."""

    @abstractmethod
    def list_children(self, parent_product_id: str) -> list[ComponentEdge]:
        """Return the direct component edges of a product, in display order."""

    @abstractmethod
    def list_parents(self, component_product_id: str) -> list[ComponentEdge]:
        """Return every edge that uses the product as a component."""

    @abstractmethod
    def has_parent_other_than(self, component_product_id: str, parent_product_id: str) -> bool:
        """True if the component is also used by any other parent."""

    @abstractmethod
    def save(self, edge: ComponentEdge) -> None:
        """Insert or replace the edge keyed by (parent, component)."""

    @abstractmethod
    def delete(self, parent_product_id: str, component_product_id: str) -> None:
        """Delete the edge. Callers check existence first."""
