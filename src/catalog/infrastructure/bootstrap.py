"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions. Configuration is read
on each call so tests can point the CLI at a temporary directory.
"""

from __future__ import annotations

from catalog.infrastructure.config import Config
from catalog.infrastructure.persistence.json_component_repository import (
    JsonComponentRepository,
)
from catalog.infrastructure.persistence.json_order_item_repository import (
    JsonOrderItemRepository,
)
from catalog.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from catalog.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork


def config() -> Config:
    return Config.from_env()


def unit_of_work() -> JsonUnitOfWork:
    return JsonUnitOfWork(config().data_dir)


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(config().data_dir / JsonUnitOfWork.PRODUCTS_FILE)


def component_repository() -> JsonComponentRepository:
    return JsonComponentRepository(config().data_dir / JsonUnitOfWork.COMPONENTS_FILE)


def order_item_repository() -> JsonOrderItemRepository:
    return JsonOrderItemRepository(config().data_dir / JsonUnitOfWork.ORDER_ITEMS_FILE)
