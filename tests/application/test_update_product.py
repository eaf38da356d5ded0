"""Integration tests for the UpdateProduct use case (edit or fork)."""

import copy

import pytest

from catalog.application.create_order_items import CreateOrderItemsHandler
from catalog.application.dto import OrderItemSpec
from catalog.application.update_product import UpdateProductHandler
from catalog.domain.exceptions import ConflictError, EntityNotFoundError, ValidationError
from catalog.domain.model.product import ProductPatch
from catalog.domain.model.value_objects import Money
from tests.fakes import FakeUnitOfWork, make_product


def _setup() -> FakeUnitOfWork:
    return FakeUnitOfWork(products=[make_product("widget", price="10")])


class TestUpdateProduct:

    def test_unordered_product_mutated_in_place(self):
        uow = _setup()
        result = UpdateProductHandler(uow).handle("widget", ProductPatch(price=Money.of("12")))

        assert not result.versioned
        assert result.product.id == "widget"
        assert result.product.version == 1
        assert uow.products.get_by_id("widget").price == Money.of("12")
        assert uow.locked_ids == ["widget"]
        assert uow.committed

    def test_ordered_product_forked(self):
        uow = _setup()
        CreateOrderItemsHandler(uow).handle([OrderItemSpec("widget", 1)])
        original = copy.deepcopy(uow.products.get_by_id("widget"))

        result = UpdateProductHandler(uow).handle("widget", ProductPatch(price=Money.of("12")))

        assert result.versioned
        assert result.product.id == "widget_v2"
        assert result.product.version == 2
        assert uow.products.get_by_id("widget") == original
        assert uow.products.get_by_id("widget_v2").price == Money.of("12")

    def test_second_edit_of_ordered_row_is_turned_away(self):
        uow = _setup()
        CreateOrderItemsHandler(uow).handle([OrderItemSpec("widget", 1)])
        UpdateProductHandler(uow).handle("widget", ProductPatch(name="First"))

        with pytest.raises(ConflictError, match="newer version"):
            UpdateProductHandler(uow).handle("widget", ProductPatch(name="Second"))
        assert [p.id for p in uow.products.list_lineage("widget")] == ["widget", "widget_v2"]

    def test_empty_patch_rejected(self):
        with pytest.raises(ValidationError, match="Nothing to update"):
            UpdateProductHandler(_setup()).handle("widget", ProductPatch())

    def test_missing_product_rolls_back(self):
        uow = _setup()
        with pytest.raises(EntityNotFoundError):
            UpdateProductHandler(uow).handle("nope", ProductPatch(name="x"))
        assert uow.rolled_back
        assert not uow.committed
