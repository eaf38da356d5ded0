"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from catalog.domain.model.product import Product, ProductImage, ProductStatus, ProductType
from catalog.domain.model.value_objects import Money
from catalog.domain.repository.product_repository import ProductRepository
from catalog.infrastructure.persistence.json_file import JsonTable


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._table = JsonTable(file_path)

    @property
    def table(self) -> JsonTable:
        return self._table

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def get_many(self, product_ids: Iterable[str]) -> dict[str, Product]:
        wanted = set(product_ids)
        return {pid: p for pid, p in self._load().items() if pid in wanted}

    def get_by_slug(self, slug: str) -> Product | None:
        return next((p for p in self._load().values() if p.slug == slug), None)

    def get_by_sku(self, sku: str) -> Product | None:
        return next((p for p in self._load().values() if p.sku == sku), None)

    def get_successor(self, product_id: str) -> Product | None:
        return next(
            (p for p in self._load().values() if p.previous_version_id == product_id),
            None,
        )

    def list_lineage(self, base_product_id: str) -> list[Product]:
        rows = [p for p in self._load().values() if p.lineage_id == base_product_id]
        return sorted(rows, key=lambda p: p.version)

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def save(self, product: Product) -> None:
        products = self._load()
        products[product.id] = product
        self._table.persist([self._to_raw(p) for p in products.values()])

    def delete(self, product_id: str) -> None:
        products = self._load()
        products.pop(product_id, None)
        self._table.persist([self._to_raw(p) for p in products.values()])

    # --- Serialization --------------------------------------------------------

    def _load(self) -> dict[str, Product]:
        return {raw["id"]: self._to_domain(raw) for raw in self._table.load()}

    @staticmethod
    def _to_raw(p: Product) -> dict:
        return {
            "id": p.id,
            "sku": p.sku,
            "slug": p.slug,
            "name": p.name,
            "price": str(p.price.amount),
            "component_price": (
                str(p.component_price.amount) if p.component_price is not None else None
            ),
            "currency": p.price.currency,
            "version": p.version,
            "product_type": p.product_type.value,
            "status": p.status.value,
            "is_available_for_purchase": p.is_available_for_purchase,
            "images": [{"url": i.url, "alt_text": i.alt_text} for i in p.images],
            "base_product_id": p.base_product_id,
            "previous_version_id": p.previous_version_id,
            "replacement_product_id": p.replacement_product_id,
            "sunset_reason": p.sunset_reason,
            "sunset_at": p.sunset_at.isoformat() if p.sunset_at else None,
            "discontinued_at": p.discontinued_at.isoformat() if p.discontinued_at else None,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        currency = raw.get("currency", "USD")
        component_price = raw.get("component_price")
        return Product(
            id=raw["id"],
            sku=raw["sku"],
            slug=raw["slug"],
            name=raw["name"],
            price=Money(Decimal(raw["price"]), currency),
            component_price=(
                Money(Decimal(component_price), currency) if component_price is not None else None
            ),
            version=raw.get("version", 1),
            product_type=ProductType(raw.get("product_type", "standalone")),
            status=ProductStatus(raw.get("status", "active")),
            is_available_for_purchase=raw.get("is_available_for_purchase", True),
            images=[
                ProductImage(url=i["url"], alt_text=i.get("alt_text", ""))
                for i in raw.get("images", [])
            ],
            base_product_id=raw.get("base_product_id"),
            previous_version_id=raw.get("previous_version_id"),
            replacement_product_id=raw.get("replacement_product_id"),
            sunset_reason=raw.get("sunset_reason"),
            sunset_at=_parse_dt(raw.get("sunset_at")),
            discontinued_at=_parse_dt(raw.get("discontinued_at")),
        )


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
