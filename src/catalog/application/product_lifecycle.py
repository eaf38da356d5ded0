"""Application services: Sunset, Discontinue and Delete Product use cases."""

from __future__ import annotations

from catalog.domain.model.product import Product
from catalog.domain.repository.unit_of_work import UnitOfWork
from catalog.domain.service.versioning_service import VersioningService


class SunsetProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: str,
        reason: str,
        replacement_product_id: str | None = None,
    ) -> Product:
        """Stop new purchases, optionally pointing shoppers at a replacement."""
        with self._uow:
            self._uow.lock_product(product_id)
            versioning = VersioningService(self._uow.products, self._uow.order_items)
            product = versioning.sunset_product(product_id, reason, replacement_product_id)
            self._uow.commit()
        return product


class DiscontinueProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str, reason: str | None = None) -> Product:
        with self._uow:
            self._uow.lock_product(product_id)
            versioning = VersioningService(self._uow.products, self._uow.order_items)
            product = versioning.discontinue_product(product_id, reason)
            self._uow.commit()
        return product


class DeleteProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str) -> Product:
        """Delete a never-ordered product and detach it from every parent."""
        with self._uow:
            parent_ids = [e.parent_product_id for e in self._uow.components.list_parents(product_id)]
            self._uow.lock_products(product_id, *parent_ids)
            versioning = VersioningService(
                self._uow.products, self._uow.order_items, self._uow.components
            )
            product = versioning.delete_product(product_id)
            self._uow.commit()
        return product
