"""
Unit tests for TaskService

Repositories are replaced by an in-memory store so progress written by
one call is what the next call reads back.

Author: TM3
Date: 2026-03-02
"""
from datetime import timedelta

import pytest
from unittest.mock import Mock

from storefront.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from storefront.domain.task import Task, TaskItem
from storefront.effects import EFFECT_NAMES
from storefront.services.task_service import TaskService, effect_for_task, start_of_day


class FakeTaskStore:
    """Just enough of TaskRepository for the service"""

    def __init__(self, *tasks):
        self.rows = {task.id: task for task in tasks}

    def find_by_id(self, task_id):
        return self.rows.get(task_id)

    def update(self, task_id, fields):
        current = self.rows.get(task_id)
        if current is None:
            return None
        updated = current.model_copy(update=fields)
        self.rows[task_id] = updated
        return updated


@pytest.fixture
def service_parts(sample_task):
    store = FakeTaskStore(sample_task)
    tasks = Mock()
    tasks.find_by_id.side_effect = store.find_by_id
    tasks.update.side_effect = store.update

    orders = Mock()
    orders.find_by_user_since.return_value = []

    task_settings = Mock()
    task_settings.requirement_for.return_value = TaskItem()

    sales = Mock()
    service = TaskService(tasks=tasks, orders=orders, task_settings=task_settings, sales=sales)
    return service, store, orders, task_settings, sales


class TestCompleteTask:

    def test_marks_task_done_and_counts_it(self, service_parts, customer, now):
        # Arrange
        service, store, orders, _, sales = service_parts

        # Act
        task, effect = service.complete_task(customer, "task-1", "task1", now)

        # Assert
        assert task.progress == {"task1": True, "task2": False, "task3": False}
        assert store.rows["task-1"].last_edit == now
        assert effect == EFFECT_NAMES[0]
        orders.find_by_user_since.assert_called_once_with("user-1", start_of_day(now))
        sales.record_task_completion.assert_called_once_with("user-1")

    def test_locked_task_is_rejected(self, service_parts, customer, now):
        service, _, _, _, sales = service_parts

        with pytest.raises(ValidationError):
            service.complete_task(customer, "task-1", "task2", now)
        sales.record_task_completion.assert_not_called()

    def test_completed_task_is_rejected(self, service_parts, customer, now):
        service, store, _, _, _ = service_parts
        store.rows["task-1"] = store.rows["task-1"].model_copy(update={"progress": {"task1": True, "task2": False}})

        with pytest.raises(ConflictError):
            service.complete_task(customer, "task-1", "task1", now)

    def test_unknown_key_is_rejected(self, service_parts, customer, now):
        service = service_parts[0]

        with pytest.raises(ValidationError):
            service.complete_task(customer, "task-1", "task99", now)

    def test_other_users_board_is_forbidden(self, service_parts, admin, now):
        service = service_parts[0]

        with pytest.raises(ForbiddenError):
            service.complete_task(admin, "task-1", "task1", now)

    def test_missing_purchase_blocks_completion(self, service_parts, customer, now):
        # Arrange
        service, _, _, task_settings, _ = service_parts
        task_settings.requirement_for.return_value = TaskItem(product_id="prod-1", amount="2")

        # Act / Assert
        with pytest.raises(ValidationError) as exc_info:
            service.complete_task(customer, "task-1", "task1", now)
        assert "Purchase the required product" in exc_info.value.message

    def test_stale_board_is_reset_before_completion(self, service_parts, customer, now):
        # Arrange
        service, store, _, _, _ = service_parts
        store.rows["task-1"] = store.rows["task-1"].model_copy(update={
            "progress": {"task1": True, "task2": True, "task3": False},
            "last_edit": now - timedelta(days=1),
        })

        # Act
        task, _ = service.complete_task(customer, "task-1", "task1", now)

        # Assert: yesterday's progress is gone, today's board has task1 done
        assert task.progress["task1"] is True
        assert task.progress["task2"] is False
        assert len(task.progress) == 36
        assert task.last_edit == now


class TestBoard:

    def test_creates_board_on_first_visit(self, now):
        # Arrange
        tasks = Mock()
        tasks.find_by_user.return_value = None
        tasks.create.side_effect = lambda user_id, progress, last_edit, allow_system_reset: Task(
            id="task-new", user_id=user_id, progress=progress, last_edit=now
        )
        task_settings = Mock()
        task_settings.current.return_value.requirement_for.return_value = TaskItem()
        service = TaskService(tasks=tasks, orders=Mock(), task_settings=task_settings, sales=Mock())

        # Act
        board = service.board("user-1", now)

        # Assert
        tasks.create.assert_called_once()
        assert board["percentage"] == 0
        assert [entry["key"] for entry in board["entries"][:3]] == ["task1", "task2", "task3"]
        assert board["entries"][0]["available"] is True
        assert board["entries"][1]["available"] is False

    def test_stale_board_is_shown_fresh(self, sample_task, now):
        # Arrange
        tasks = Mock()
        tasks.find_by_user.return_value = sample_task.model_copy(update={
            "progress": {"task1": True, "task2": False},
            "last_edit": now - timedelta(days=2),
        })
        task_settings = Mock()
        task_settings.current.return_value.requirement_for.return_value = TaskItem()
        service = TaskService(tasks=tasks, orders=Mock(), task_settings=task_settings, sales=Mock())

        # Act
        board = service.board("user-1", now)

        # Assert
        assert board["percentage"] == 0
        assert all(entry["done"] is False for entry in board["entries"])
        tasks.update.assert_not_called()


class TestTaskHelpers:

    def test_effect_cycles_by_task_number(self):
        assert effect_for_task("task1") == EFFECT_NAMES[0]
        assert effect_for_task("task2") == EFFECT_NAMES[1]
        assert effect_for_task(f"task{len(EFFECT_NAMES) + 1}") == EFFECT_NAMES[0]

    def test_start_of_day(self, now):
        midnight = start_of_day(now)
        assert (midnight.hour, midnight.minute) == (0, 0)
        assert midnight.date() == now.date()

    def test_missing_task(self):
        tasks = Mock()
        tasks.find_by_id.return_value = None
        service = TaskService(tasks=tasks, orders=Mock(), task_settings=Mock(), sales=Mock())

        with pytest.raises(NotFoundError):
            service.get_task_by_id("nope")
