"""Application service: Update Product use case.

The admin edit flow. Under a lock on the product row it decides whether
the row is still editable: a product no order has captured is changed in
place (its version stays the same); an ordered one is forked into a new
version and the original row is left exactly as it was.
"""

from __future__ import annotations

from catalog.application.dto import ProductUpdateResult
from catalog.domain.exceptions import ValidationError
from catalog.domain.model.product import ProductPatch
from catalog.domain.repository.unit_of_work import UnitOfWork
from catalog.domain.service.versioning_service import VersioningService


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str, patch: ProductPatch) -> ProductUpdateResult:
        if patch.is_empty:
            raise ValidationError("Nothing to update")

        with self._uow:
            self._uow.lock_product(product_id)
            versioning = VersioningService(self._uow.products, self._uow.order_items)

            if versioning.is_product_in_orders(product_id):
                product = versioning.create_product_version(product_id, patch)
                versioned = True
            else:
                product = versioning.update_product_in_place(product_id, patch)
                versioned = False

            self._uow.commit()

        return ProductUpdateResult(product=product, versioned=versioned)
