"""Integration tests for checkout (CreateOrderItems) and ShowOrder."""

import pytest

from catalog.application.create_order_items import CreateOrderItemsHandler
from catalog.application.dto import OrderItemSpec
from catalog.application.show_order import ShowOrderHandler
from catalog.application.update_product import UpdateProductHandler
from catalog.domain.exceptions import ConflictError, EntityNotFoundError, ValidationError
from catalog.domain.model.component import ComponentEdge
from catalog.domain.model.product import ProductPatch, ProductStatus
from catalog.domain.model.value_objects import Money
from tests.fakes import FakeUnitOfWork, make_product


def _setup() -> FakeUnitOfWork:
    return FakeUnitOfWork(
        products=[
            make_product("kit", price="100"),
            make_product("x", price="10"),
            make_product("y", price="5"),
            make_product("mug", price="30"),
            make_product("retired", status=ProductStatus.SUNSET, is_available_for_purchase=False),
        ],
        edges=[
            ComponentEdge.create("kit", "x", quantity=2),
            ComponentEdge.create("kit", "y", is_included=False),
        ],
    )


class TestCreateOrderItems:

    def test_snapshots_persisted_with_totals(self):
        uow = _setup()
        result = CreateOrderItemsHandler(uow).handle([
            OrderItemSpec("kit", 2),
            OrderItemSpec("mug", 1),
        ])

        assert result.order_id == "1"
        assert [s.product_id for s in result.snapshots] == ["kit", "mug"]
        assert result.snapshots[0].price == Money.of("125")
        assert result.totals.subtotal == Money.of("280")
        assert result.totals.item_count == 3
        assert [line.snapshot for line in uow.order_items.list_by_order("1")] == result.snapshots
        assert uow.committed

    def test_unavailable_products_reject_whole_order(self):
        uow = _setup()
        with pytest.raises(ValidationError, match="retired, ghost"):
            CreateOrderItemsHandler(uow).handle([
                OrderItemSpec("kit", 1),
                OrderItemSpec("retired", 1),
                OrderItemSpec("ghost", 1),
            ])
        assert uow.order_items.list_by_order("1") == []
        assert uow.rolled_back

    def test_bad_quantity_writes_nothing(self):
        uow = _setup()
        with pytest.raises(ValidationError):
            CreateOrderItemsHandler(uow).handle([
                OrderItemSpec("mug", 1),
                OrderItemSpec("kit", 0),
            ])
        assert uow.order_items.list_by_order("1") == []

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            CreateOrderItemsHandler(_setup()).handle([])

    def test_explicit_order_id_must_be_new(self):
        uow = _setup()
        CreateOrderItemsHandler(uow).handle([OrderItemSpec("mug", 1)], order_id="A-1")
        with pytest.raises(ConflictError):
            CreateOrderItemsHandler(uow).handle([OrderItemSpec("mug", 1)], order_id="A-1")

    def test_snapshot_depth_passed_through(self):
        uow = _setup()
        uow.products.save(make_product("bolt", price="1"))
        uow.components.save(ComponentEdge.create("x", "bolt"))
        shallow = CreateOrderItemsHandler(uow, snapshot_depth=1).handle([OrderItemSpec("kit", 1)])
        assert shallow.snapshots[0].component_tree[0].components == ()


class TestShowOrder:

    def test_order_survives_catalog_changes(self):
        uow = _setup()
        CreateOrderItemsHandler(uow).handle([OrderItemSpec("kit", 2)])
        UpdateProductHandler(uow).handle("kit", ProductPatch(price=Money.of("500")))
        x = uow.products.get_by_id("x")
        x.price = Money.of("99")
        uow.products.save(x)

        dto = ShowOrderHandler(uow.order_items).handle("1")

        assert dto.lines[0].unit_price == "$125.00"
        assert dto.lines[0].line_total == "$250.00"
        assert dto.lines[0].component_count == 2
        assert dto.subtotal == "$250.00"
        assert dto.item_count == 2

    def test_unknown_order(self):
        with pytest.raises(EntityNotFoundError):
            ShowOrderHandler(_setup().order_items).handle("404")
