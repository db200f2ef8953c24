"""
Unit tests for domain models

Author: TM3
Date: 2026-03-02
"""
from datetime import timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from storefront.domain.product import Product, ProductCreate, ProductUpdate
from storefront.domain.referral_code import ReferralCode
from storefront.domain.sale import Sale
from storefront.domain.shipment import ShipmentAutomation
from storefront.domain.task import TaskItem, TaskSettings, default_progress
from storefront.domain.user import User
from storefront.domain.withdrawal import WithdrawalStatus


class TestProduct:

    def test_final_price_applies_discount(self, sample_product):
        assert sample_product.final_price == 90

    def test_to_dict_includes_computed_fields(self, sample_product):
        data = sample_product.to_dict()

        assert data['final_price'] == 90.0
        assert data['is_out_of_stock'] is False
        assert data['image_urls'] == ["mug-front.png", "mug-back.png"]

    def test_cover_image_and_stock(self):
        product = Product(id="p", name="Empty", quantity=0, price=10)

        assert product.cover_image is None
        assert product.is_out_of_stock is True
        assert product.final_price == 10

    def test_discount_rate_is_bounded(self):
        with pytest.raises(PydanticValidationError):
            ProductCreate(name="Mug", price=10, discount_rate=120)

    def test_legacy_image_url_is_folded_in_front(self):
        data = ProductCreate(name="Mug", price=10, image_url="legacy.png", image_urls=["new.png"])
        assert data.image_urls == ["legacy.png", "new.png"]

    def test_empty_legacy_image_url_is_dropped(self):
        data = ProductUpdate(image_url="")
        assert data.image_urls is None


class TestSale:

    def test_trial_bonus_counts_on_its_day(self, sample_sale, now):
        assert sample_sale.available_funds(now.date()) == 350

    def test_trial_bonus_ignored_on_other_days(self, sample_sale, now):
        assert sample_sale.available_funds((now + timedelta(days=1)).date()) == 50

    def test_no_trial_date(self, now):
        sale = Sale(id="s", user_id="u", balance=20, trial_bonus=300)
        assert sale.available_funds(now.date()) == 20


class TestTaskModels:

    def test_default_progress_keys(self):
        assert default_progress(3) == {"task1": False, "task2": False, "task3": False}

    @pytest.mark.parametrize("raw, expected", [
        ("3", 3),
        ("2.0", 2),
        (4, 4),
        ("", None),
        (None, None),
        ("many", None),
    ])
    def test_required_amount(self, raw, expected):
        assert TaskItem(product_id="p1", amount=raw).required_amount == expected

    def test_settings_parse_json_string(self):
        settings = TaskSettings(settings='{"task1": {"product_id": "p1", "amount": "2"}}')

        assert settings.requirement_for("task1").product_id == "p1"
        assert settings.requirement_for("task9").has_requirement is False

    def test_required_amount_for_product(self):
        settings = TaskSettings(settings={
            "task1": TaskItem(product_id="p1", amount="2"),
            "task2": TaskItem(product_id="p2", amount=""),
        })

        assert settings.required_amount_for("p1") == 2
        assert settings.required_amount_for("p2") is None
        assert settings.required_amount_for("p3") is None


class TestOtherModels:

    def test_withdrawal_to_dict(self, pending_withdrawal):
        data = pending_withdrawal.to_dict()

        assert data["status"] == 1
        assert data["status_label"] == "pending"
        assert pending_withdrawal.is_pending is True

    def test_withdrawal_status_values(self):
        assert [s.value for s in WithdrawalStatus] == [1, 2, 3]

    def test_referral_code_must_be_six_digits(self):
        assert ReferralCode(id="r", code="123456").is_redeemed is False
        with pytest.raises(PydanticValidationError):
            ReferralCode(id="r", code="12ab")

    def test_automation_progress_from_json(self):
        automation = ShipmentAutomation(
            id="a",
            name="Standard",
            progress='[{"name": "Packed", "after_hour": 0}, {"name": "Shipped", "after_hour": 24}]'
        )
        assert [rule.name for rule in automation.progress] == ["Packed", "Shipped"]

    def test_user_referral_code_from_prefs(self):
        user = User(id="u", name="Aina", prefs={"referral_code": "654321"})

        assert user.referral_code == "654321"
        assert user.to_dict()["referral_code"] == "654321"
