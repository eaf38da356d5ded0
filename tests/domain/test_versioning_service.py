"""Tests for VersioningService: order references, forks and lifecycle."""

import copy

import pytest

from catalog.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    StateError,
    ValidationError,
)
from catalog.domain.model.component import ComponentEdge
from catalog.domain.model.product import ProductPatch, ProductStatus
from catalog.domain.model.snapshot import OrderLine
from catalog.domain.model.value_objects import Money
from catalog.domain.service.component_graph_service import ComponentGraphService
from catalog.domain.service.snapshot_service import SnapshotService
from catalog.domain.service.versioning_service import VersioningService
from tests.fakes import (
    FakeComponentRepository,
    FakeOrderItemRepository,
    FakeProductRepository,
    make_product,
)


def _setup(products=None, edges=None):
    if products is None:
        products = [
            make_product("widget", price="10"),
            make_product("kit", price="50"),
            make_product("bolt", price="1"),
            make_product("spare", price="20"),
        ]
    product_repo = FakeProductRepository(products)
    component_repo = FakeComponentRepository(edges)
    order_item_repo = FakeOrderItemRepository()
    versioning = VersioningService(product_repo, order_item_repo, component_repo)
    snapshots = SnapshotService(product_repo, ComponentGraphService(product_repo, component_repo))
    return versioning, snapshots, product_repo, order_item_repo


def _order(snapshots, order_item_repo, product_id, quantity=1):
    snapshot = snapshots.create_order_item_snapshot(product_id, quantity)
    order_item_repo.add(OrderLine(order_id="1", snapshot=snapshot))
    return snapshot


class TestIsProductInOrders:

    def test_false_before_any_order(self):
        versioning, _, _, _ = _setup()
        assert not versioning.is_product_in_orders("widget")

    def test_true_for_ordered_product(self):
        versioning, snapshots, _, orders = _setup()
        _order(snapshots, orders, "widget")
        assert versioning.is_product_in_orders("widget")
        assert not versioning.is_product_in_orders("kit")

    def test_true_for_captured_component(self):
        versioning, snapshots, _, orders = _setup(edges=[ComponentEdge.create("kit", "bolt")])
        _order(snapshots, orders, "kit")
        assert versioning.is_product_in_orders("bolt")


class TestCreateProductVersion:

    def test_fork_yields_new_row_with_next_version(self):
        versioning, snapshots, product_repo, orders = _setup()
        _order(snapshots, orders, "widget")
        original = copy.deepcopy(product_repo.get_by_id("widget"))

        forked = versioning.create_product_version("widget", ProductPatch(price=Money.of("12")))

        assert forked.id != "widget"
        assert forked.version == original.version + 1
        assert forked.slug != original.slug
        assert product_repo.get_by_id(forked.id).price == Money.of("12")
        assert product_repo.get_by_id("widget") == original

    def test_second_fork_of_same_source_rejected(self):
        versioning, _, _, _ = _setup()
        versioning.create_product_version("widget", ProductPatch(name="A"))
        with pytest.raises(ConflictError, match="already has a newer version"):
            versioning.create_product_version("widget", ProductPatch(name="B"))

    def test_fork_of_latest_continues_lineage(self):
        versioning, _, _, _ = _setup()
        v2 = versioning.create_product_version("widget", ProductPatch(name="A"))
        v3 = versioning.create_product_version(v2.id, ProductPatch(name="B"))
        assert v3.version == 3
        assert [p.id for p in versioning.get_product_versions("widget")] == [
            "widget", v2.id, v3.id,
        ]
        assert versioning.get_latest_version("widget").id == v3.id

    def test_slug_collision_rejected(self):
        versioning, _, _, _ = _setup()
        with pytest.raises(ConflictError, match="Slug 'kit'"):
            versioning.create_product_version("widget", ProductPatch(slug="kit"))

    def test_sku_collision_with_other_lineage_rejected(self):
        versioning, _, _, _ = _setup()
        with pytest.raises(ConflictError, match="SKU"):
            versioning.create_product_version("widget", ProductPatch(sku="SKU-kit"))

    def test_missing_product(self):
        versioning, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            versioning.create_product_version("nope", ProductPatch(name="x"))


class TestUpdateProductInPlace:

    def test_unordered_product_edited_in_place(self):
        versioning, _, product_repo, _ = _setup()
        updated = versioning.update_product_in_place("widget", ProductPatch(price=Money.of("11")))
        assert updated.id == "widget"
        assert updated.version == 1
        assert product_repo.get_by_id("widget").price == Money.of("11")

    def test_ordered_product_rejected(self):
        versioning, snapshots, product_repo, orders = _setup()
        _order(snapshots, orders, "widget")
        with pytest.raises(ConflictError, match="referenced by orders"):
            versioning.update_product_in_place("widget", ProductPatch(price=Money.of("11")))
        assert product_repo.get_by_id("widget").price == Money.of("10")


class TestLifecycle:

    def test_sunset_with_replacement(self):
        versioning, _, product_repo, _ = _setup()
        versioning.sunset_product("widget", "superseded", replacement_product_id="kit")
        stored = product_repo.get_by_id("widget")
        assert stored.status == ProductStatus.SUNSET
        assert not stored.is_available_for_purchase
        assert stored.replacement_product_id == "kit"

    def test_sunset_requires_reason(self):
        versioning, _, _, _ = _setup()
        with pytest.raises(ValidationError, match="reason"):
            versioning.sunset_product("widget", " ")

    def test_sunset_unknown_replacement(self):
        versioning, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            versioning.sunset_product("widget", "x", replacement_product_id="nope")

    def test_sunset_twice_rejected(self):
        versioning, _, _, _ = _setup()
        versioning.sunset_product("widget", "x")
        with pytest.raises(StateError):
            versioning.sunset_product("widget", "x")

    def test_discontinue_then_again(self):
        versioning, _, product_repo, _ = _setup()
        versioning.discontinue_product("widget")
        assert product_repo.get_by_id("widget").status == ProductStatus.DISCONTINUED
        with pytest.raises(StateError, match="already discontinued"):
            versioning.discontinue_product("widget")

    def test_sunset_then_discontinue(self):
        versioning, _, product_repo, _ = _setup()
        versioning.sunset_product("widget", "x")
        versioning.discontinue_product("widget")
        assert product_repo.get_by_id("widget").status == ProductStatus.DISCONTINUED

    def test_lifecycle_of_ordered_product_leaves_snapshot_alone(self):
        versioning, snapshots, _, orders = _setup()
        snapshot = _order(snapshots, orders, "widget")
        versioning.discontinue_product("widget")
        assert orders.list_by_order("1")[0].snapshot == snapshot


class TestDeleteProduct:

    def _setup(self):
        product_repo = FakeProductRepository([
            make_product("kit", price="50"),
            make_product("bolt", price="1"),
            make_product("nut", price="0.5"),
            make_product("crate", price="80"),
        ])
        component_repo = FakeComponentRepository([
            ComponentEdge.create("crate", "kit"),
            ComponentEdge.create("kit", "bolt", quantity=4),
            ComponentEdge.create("bolt", "nut"),
        ])
        order_item_repo = FakeOrderItemRepository()
        versioning = VersioningService(product_repo, order_item_repo, component_repo)
        snapshots = SnapshotService(
            product_repo, ComponentGraphService(product_repo, component_repo)
        )
        return versioning, snapshots, product_repo, component_repo, order_item_repo

    def test_unordered_product_removed_with_its_edges(self):
        versioning, _, products, components, _ = self._setup()
        deleted = versioning.delete_product("bolt")

        assert deleted.id == "bolt"
        assert products.get_by_id("bolt") is None
        assert components.get("kit", "bolt") is None
        assert components.get("bolt", "nut") is None
        assert components.get("crate", "kit") is not None
        assert products.get_by_id("nut") is not None

    def test_ordered_product_refused(self):
        versioning, snapshots, products, components, orders = self._setup()
        _order(snapshots, orders, "crate")

        with pytest.raises(ConflictError, match="sunset"):
            versioning.delete_product("bolt")
        assert products.get_by_id("bolt") is not None
        assert components.get("kit", "bolt") is not None

    def test_missing_product(self):
        versioning, _, _, _, _ = self._setup()
        with pytest.raises(EntityNotFoundError):
            versioning.delete_product("ghost")

    def test_requires_component_repository(self):
        versioning = VersioningService(FakeProductRepository(), FakeOrderItemRepository())
        with pytest.raises(RuntimeError):
            versioning.delete_product("kit")
