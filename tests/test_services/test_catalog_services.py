"""
Unit tests for the product cache, product service, orders and shipments

Author: TM3
Date: 2026-03-02
"""
from datetime import timedelta

import pytest
from unittest.mock import Mock

from storefront.core.errors import ForbiddenError, NotFoundError
from storefront.domain.product import ProductUpdate
from storefront.domain.shipment import AutomationRule, Shipment, ShipmentAutomation
from storefront.services.order_service import OrderService
from storefront.services.product_cache import ProductCache
from storefront.services.product_service import ImageUpload, ProductService
from storefront.services.shipment_service import ShipmentService, current_progress_step


class FakeClock:

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ProductCache(product_ttl=10, image_ttl=20, clock=clock)


class TestProductCache:

    def test_fetches_once_within_ttl(self, cache, clock, sample_product):
        fetch = Mock(return_value=sample_product)

        cache.get_or_fetch_product("prod-1", fetch)
        clock.now = 9
        cache.get_or_fetch_product("prod-1", fetch)

        fetch.assert_called_once_with("prod-1")

    def test_refetches_after_ttl(self, cache, clock, sample_product):
        fetch = Mock(return_value=sample_product)

        cache.get_or_fetch_product("prod-1", fetch)
        clock.now = 11
        cache.get_or_fetch_product("prod-1", fetch)

        assert fetch.call_count == 2

    def test_missing_products_are_not_cached(self, cache):
        fetch = Mock(return_value=None)

        assert cache.get_or_fetch_product("ghost", fetch) is None
        assert cache.get_or_fetch_product("ghost", fetch) is None
        assert fetch.call_count == 2

    def test_batch_fetch_only_queries_misses(self, cache, sample_product):
        cache.set_product(sample_product)
        other = sample_product.model_copy(update={"id": "prod-2"})
        fetch_many = Mock(return_value=[other])

        found = cache.batch_fetch(["prod-1", "prod-2", "prod-2"], fetch_many)

        fetch_many.assert_called_once_with(["prod-2"])
        assert set(found) == {"prod-1", "prod-2"}

    def test_images_have_their_own_ttl(self, cache, clock):
        fetch = Mock(return_value=b"png-bytes")

        cache.get_or_fetch_image("mug.png", fetch)
        clock.now = 15
        cache.get_or_fetch_image("mug.png", fetch)

        fetch.assert_called_once()

    def test_fetch_error_propagates_and_clears_pending(self, cache):
        fetch = Mock(side_effect=RuntimeError("storage down"))

        with pytest.raises(RuntimeError):
            cache.get_or_fetch_image("mug.png", fetch)
        assert cache.stats()["pending"] == 0

    def test_clean_expired(self, cache, clock, sample_product):
        cache.set_product(sample_product)
        cache.get_or_fetch_image("mug.png", Mock(return_value=b"x"))
        clock.now = 15

        assert cache.clean_expired() == 1
        assert cache.stats() == {"products": 0, "images": 1, "pending": 0}


class TestProductService:

    @pytest.fixture
    def service(self, cache):
        return ProductService(products=Mock(), storage=Mock(), cache=cache)

    def test_missing_product(self, service):
        service.products.find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            service.get_product_by_id("ghost")

    def test_update_with_images_appends_uploads(self, service, sample_product):
        # Arrange
        service.products.find_by_id.return_value = sample_product
        service.storage.upload.return_value = "new.png"
        service.products.update.return_value = sample_product

        # Act
        service.update_product_with_images(
            "prod-1",
            ProductUpdate(name="Bigger Mug"),
            [ImageUpload(content=b"data", filename="new.png"), ImageUpload(content=b"", filename="empty.png")]
        )

        # Assert
        fields = service.products.update.call_args[0][1]
        assert fields["image_urls"] == ["mug-front.png", "mug-back.png", "new.png"]
        assert fields["name"] == "Bigger Mug"
        service.storage.upload.assert_called_once()

    def test_replace_images(self, service, sample_product):
        service.products.find_by_id.return_value = sample_product
        service.products.update.return_value = sample_product

        service.update_product_with_images(
            "prod-1", ProductUpdate(image_urls=["kept.png"]), [], keep_existing_images=False
        )

        assert service.products.update.call_args[0][1]["image_urls"] == ["kept.png"]

    def test_short_stock_drops_cached_product(self, service, cache, sample_product):
        cache.set_product(sample_product)
        service.products.decrement_quantity.return_value = None

        assert service.take_stock("prod-1", 50) is None
        assert cache.get_product("prod-1") is None

    def test_delete_missing(self, service):
        service.products.delete.return_value = False

        with pytest.raises(NotFoundError):
            service.delete_product("ghost")


class TestOrderService:

    def test_describe_orders_adds_totals_and_commission(self, sample_order, sample_product):
        products = Mock()
        products.get_products_by_ids.return_value = {"prod-1": sample_product}
        service = OrderService(orders=Mock(), products=products)

        line = service.describe_orders([sample_order])[0]

        assert line["unit_price"] == 90
        assert line["total"] == 180
        assert line["commission"] == pytest.approx(5.4)

    def test_order_of_deleted_product(self, sample_order):
        products = Mock()
        products.get_products_by_ids.return_value = {}
        service = OrderService(orders=Mock(), products=products)

        line = service.describe_orders([sample_order])[0]

        assert line["product"] is None
        assert line["total"] == 0

    def test_only_owner_updates(self, sample_order, admin):
        orders = Mock()
        orders.find_by_id.return_value = sample_order
        service = OrderService(orders=orders, products=Mock())

        with pytest.raises(ForbiddenError):
            service.delete_order(admin, "order-1")


class TestShipments:

    RULES = [
        AutomationRule(name="Packed", after_hour=0),
        AutomationRule(name="Shipped", after_hour=24),
        AutomationRule(name="Delivered", after_hour=48),
    ]

    @pytest.mark.parametrize("hours, expected", [(1, "Packed"), (30, "Shipped"), (100, "Delivered")])
    def test_current_progress_step(self, now, hours, expected):
        step = current_progress_step(now - timedelta(hours=hours), self.RULES, now)
        assert step.name == expected

    def test_first_step_before_any_elapsed(self, now):
        rules = [AutomationRule(name="Confirmed", after_hour=2), AutomationRule(name="Shipped", after_hour=24)]
        assert current_progress_step(now, rules, now).name == "Confirmed"

    def test_no_rules(self, now):
        assert current_progress_step(now, [], now) is None

    def test_shipment_status_uses_automation(self, now):
        automations = Mock()
        automations.find_by_id.return_value = ShipmentAutomation(id="a1", name="Standard", progress=self.RULES)
        service = ShipmentService(automations=automations, shipments=Mock())
        shipment = Shipment(id="sh1", user_id="user-1", shipment_automation_id="a1", product_id="prod-1",
                            order_date=now - timedelta(hours=30))

        assert service.shipment_status(shipment, now).name == "Shipped"

    def test_shipment_without_automation(self, now):
        service = ShipmentService(automations=Mock(), shipments=Mock())
        shipment = Shipment(id="sh1", user_id="user-1", product_id="prod-1", order_date=now)

        assert service.shipment_status(shipment, now) is None
        service.automations.find_by_id.assert_not_called()

    def test_other_admin_cannot_delete_automation(self, admin):
        automations = Mock()
        automations.find_by_id.return_value = ShipmentAutomation(id="a1", user_id="admin-2", name="Standard")
        service = ShipmentService(automations=automations, shipments=Mock())

        with pytest.raises(ForbiddenError):
            service.delete_shipment_automation(admin, "a1")
        automations.delete.assert_not_called()

    def test_superadmin_may_delete_any_automation(self, superadmin):
        automations = Mock()
        automations.find_by_id.return_value = ShipmentAutomation(id="a1", user_id="admin-2", name="Standard")
        service = ShipmentService(automations=automations, shipments=Mock())

        service.delete_shipment_automation(superadmin, "a1")

        automations.delete.assert_called_once_with("a1")
