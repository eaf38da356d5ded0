"""Application service: Add Product use case."""

from __future__ import annotations

import logging

from catalog.domain.exceptions import ConflictError, ValidationError
from catalog.domain.model.product import Product, ProductImage, ProductType
from catalog.domain.model.value_objects import Money
from catalog.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: str,
        sku: str,
        name: str,
        price: str,
        slug: str | None = None,
        component_price: str | None = None,
        product_type: str = ProductType.STANDALONE.value,
        image_urls: list[str] | None = None,
    ) -> Product:
        """Add a new version-1 product to the catalog."""
        product = Product.create(
            product_id=product_id,
            sku=sku,
            name=name,
            price=Money.of(price),
            slug=slug,
            component_price=Money.of(component_price) if component_price is not None else None,
            product_type=_parse_type(product_type),
            images=[ProductImage(url=url) for url in image_urls or []],
        )

        with self._uow:
            self._uow.lock_product(product.id)
            repo = self._uow.products
            if repo.get_by_id(product.id) is not None:
                raise ConflictError(f"Product {product.id!r} already exists")
            if repo.get_by_slug(product.slug) is not None:
                raise ConflictError(f"Slug {product.slug!r} is already in use")
            if repo.get_by_sku(product.sku) is not None:
                raise ConflictError(f"SKU {product.sku!r} is already in use")
            repo.save(product)
            self._uow.commit()

        logger.info("Added product %s (%s) at %s", product.id, product.sku, product.price)
        return product


def _parse_type(raw: str) -> ProductType:
    try:
        return ProductType(raw)
    except ValueError as exc:
        allowed = ", ".join(t.value for t in ProductType)
        raise ValidationError(f"Unknown product type {raw!r} (expected one of: {allowed})") from exc
