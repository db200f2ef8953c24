"""
Unit tests for the task board rules

Author: TM3
Date: 2026-03-02
"""
from datetime import timedelta

import pytest

from storefront.domain.order import Order
from storefront.domain.sale import Sale
from storefront.domain.task import Task, TaskItem
from storefront.services import task_rules


def order(product_id, amount, ordered_at):
    return Order(id=f"o-{product_id}-{amount}", user_id="user-1", product_id=product_id, amount=amount, ordered_at=ordered_at)


class TestOrdering:

    def test_keys_sort_numerically(self):
        progress = {"task10": False, "task2": False, "paywall1": False, "task1": True}

        assert task_rules.ordered_keys(progress) == ["paywall1", "task1", "task2", "task10"]
        assert task_rules.ordered_task_keys(progress) == ["task1", "task2", "task10"]

    def test_key_number(self):
        assert task_rules.key_number("task12") == 12
        assert task_rules.key_number("paywall3") == 3
        assert task_rules.key_number("bonus") is None


class TestIsTaskAvailable:

    def test_first_task_is_always_available(self):
        assert task_rules.is_task_available("task1", {"task1": False, "task2": False}) is True

    def test_next_task_waits_for_previous(self):
        progress = {"task1": False, "task2": False}
        assert task_rules.is_task_available("task2", progress) is False

        progress["task1"] = True
        assert task_rules.is_task_available("task2", progress) is True

    def test_paywalls_are_always_available(self):
        assert task_rules.is_task_available("paywall4", {"task1": False, "paywall4": False}) is True

    def test_uncleared_paywall_blocks_later_tasks(self):
        progress = {"task1": True, "paywall1": False, "task5": False}
        assert task_rules.is_task_available("task5", progress) is False

        progress["paywall1"] = True
        assert task_rules.is_task_available("task5", progress) is True

    def test_paywall_above_task_does_not_block(self):
        progress = {"task1": True, "task5": False, "paywall9": False}
        assert task_rules.is_task_available("task5", progress) is True


class TestProgressPercentage:

    def test_no_task(self):
        assert task_rules.progress_percentage(None) == 0

    def test_rounded_share(self, now):
        task = Task(id="t", user_id="u", progress={"task1": True, "task2": False, "task3": False}, last_edit=now)
        assert task_rules.progress_percentage(task) == 33

    def test_empty_progress(self, now):
        task = Task(id="t", user_id="u", progress={}, last_edit=now)
        assert task_rules.progress_percentage(task) == 0


class TestHasCompletedTaskRequirement:

    @staticmethod
    def requirement(product_id="prod-1", amount="2"):
        item = TaskItem(product_id=product_id, amount=amount)
        return lambda key: item

    def test_no_orders_fetched(self, now):
        assert task_rules.has_completed_task_requirement("task1", None, self.requirement(), now) is False

    def test_task_without_requirement(self, now):
        assert task_rules.has_completed_task_requirement("task1", [], self.requirement(product_id=""), now) is True

    def test_order_today_with_enough_units(self, now):
        orders = [order("prod-1", 2, now)]
        assert task_rules.has_completed_task_requirement("task1", orders, self.requirement(), now) is True

    def test_order_with_too_few_units(self, now):
        orders = [order("prod-1", 1, now)]
        assert task_rules.has_completed_task_requirement("task1", orders, self.requirement(), now) is False

    def test_order_from_yesterday_does_not_count(self, now):
        orders = [order("prod-1", 5, now - timedelta(days=1))]
        assert task_rules.has_completed_task_requirement("task1", orders, self.requirement(), now) is False

    def test_other_product_does_not_count(self, now):
        orders = [order("prod-2", 5, now)]
        assert task_rules.has_completed_task_requirement("task1", orders, self.requirement(), now) is False

    def test_any_amount_when_none_set(self, now):
        orders = [order("prod-1", 1, now)]
        assert task_rules.has_completed_task_requirement("task1", orders, self.requirement(amount=""), now) is True


class TestFormatting:

    @pytest.mark.parametrize("amount, expected", [(12.5, "৳ 12.50"), (0, "৳ 0.00"), (None, "৳ 0.00")])
    def test_format_currency(self, amount, expected):
        assert task_rules.format_currency(amount) == expected

    def test_trial_bonus_date_today(self, sample_sale, now):
        assert task_rules.is_trial_bonus_date_today(sample_sale, now) is True
        assert task_rules.is_trial_bonus_date_today(sample_sale, now + timedelta(days=1)) is False
        assert task_rules.is_trial_bonus_date_today(None, now) is False
        assert task_rules.is_trial_bonus_date_today(Sale(id="s", user_id="u"), now) is False
