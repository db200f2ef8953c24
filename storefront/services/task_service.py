"""
Task Service
Daily task boards: creation, daily reset and task completion

A board belongs to one customer. Progress recorded on an earlier UTC day
is stale: the next write starts again from the default board.

Author: TM3
Date: 2026-03-02
"""
import logging
from datetime import datetime, time, timezone
from typing import Dict, List, Optional, Tuple

from storefront.core.auth import SessionUser
from storefront.core.config import settings
from storefront.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from storefront.core.timeutil import is_same_day, utc_date, utcnow
from storefront.domain.task import Task, TaskCreate, TaskUpdate, default_progress
from storefront.effects import EFFECT_NAMES
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.task_repository import TaskRepository
from storefront.services import task_rules
from storefront.services.sale_service import SaleService, get_sale_service
from storefront.services.task_settings_service import TaskSettingsService, get_task_settings_service

logger = logging.getLogger(__name__)


def start_of_day(now: datetime) -> datetime:
    return datetime.combine(utc_date(now), time.min, tzinfo=timezone.utc)


def effect_for_task(task_key: str) -> str:
    """Celebration shown after a task; cycles through every effect by task number"""
    number = task_rules.key_number(task_key) or 1
    return EFFECT_NAMES[(number - 1) % len(EFFECT_NAMES)]


class TaskService:

    def __init__(
        self,
        tasks: Optional[TaskRepository] = None,
        orders: Optional[OrderRepository] = None,
        task_settings: Optional[TaskSettingsService] = None,
        sales: Optional[SaleService] = None
    ):
        self.tasks = tasks or TaskRepository()
        self.orders = orders or OrderRepository()
        self.task_settings = task_settings or get_task_settings_service()
        self.sales = sales or get_sale_service()

    def _default_progress(self) -> Dict[str, bool]:
        return default_progress(settings.TASK_SLOTS)

    def create_task(self, user_id: str, data: Optional[TaskCreate] = None) -> Task:
        data = data or TaskCreate()
        task = self.tasks.create(
            user_id,
            data.progress or self._default_progress(),
            utcnow(),
            data.allow_system_reset
        )
        logger.info(f"Created task board {task.id} for user {user_id}")
        return task

    def get_tasks(self, limit: int = 10) -> List[Task]:
        return self.tasks.find_all(limit=limit)

    def get_task_by_id(self, task_id: str) -> Task:
        task = self.tasks.find_by_id(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def get_user_tasks(self, user_id: str) -> Task:
        """Board of a user, created on first visit"""
        task = self.tasks.find_by_user(user_id)
        if task is None:
            task = self.create_task(user_id)
        return task

    def update_task(self, task_id: str, data: TaskUpdate, now: Optional[datetime] = None) -> Task:
        now = now or utcnow()
        current = self.get_task_by_id(task_id)

        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        if "progress" not in fields and not is_same_day(current.last_edit, now):
            fields["progress"] = self._default_progress()
        fields["last_edit"] = now

        task = self.tasks.update(task_id, fields)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def update_task_progress(
        self,
        task_id: str,
        progress: Dict[str, bool],
        now: Optional[datetime] = None
    ) -> Task:
        """Store progress; a board last edited on another day is reset instead"""
        now = now or utcnow()
        current = self.get_task_by_id(task_id)

        if not is_same_day(current.last_edit, now):
            logger.info(f"Task board {task_id} is from an earlier day, resetting")
            progress = self._default_progress()

        task = self.tasks.update(task_id, {"progress": progress, "last_edit": now})
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def complete_task(
        self,
        user: SessionUser,
        task_id: str,
        task_key: str,
        now: Optional[datetime] = None
    ) -> Tuple[Task, str]:
        """
        Mark one entry of the board as done

        The entry must be unlocked and, when the task settings tie it to a
        product, an order of that product placed today must cover the
        required amount.

        Returns:
            (updated task, name of the celebration effect to play)
        """
        now = now or utcnow()
        task = self.get_task_by_id(task_id)
        if task.user_id != user.id:
            raise ForbiddenError("Not authorized to update this task")

        if not is_same_day(task.last_edit, now):
            task = self.update_task_progress(task.id, self._default_progress(), now)

        progress = dict(task.progress)
        if task_key not in progress:
            raise ValidationError(f"Unknown task {task_key}")
        if progress[task_key] is True:
            raise ConflictError("Task already completed")
        if not task_rules.is_task_available(task_key, progress):
            raise ValidationError("Complete the previous tasks first")

        orders = self.orders.find_by_user_since(user.id, start_of_day(now))
        if not task_rules.has_completed_task_requirement(
            task_key, orders, self.task_settings.requirement_for, now
        ):
            raise ValidationError("Purchase the required product to complete this task")

        progress[task_key] = True
        task = self.update_task_progress(task.id, progress, now)
        self.sales.record_task_completion(user.id)

        effect = effect_for_task(task_key)
        logger.info(f"User {user.id} completed {task_key} ({effect})")
        return task, effect

    def board(self, user_id: str, now: Optional[datetime] = None) -> Dict:
        """
        Everything the task page shows: entries in order with their lock
        state and requirement, plus overall progress
        """
        now = now or utcnow()
        task = self.get_user_tasks(user_id)
        progress = task.progress if is_same_day(task.last_edit, now) else self._default_progress()
        requirements = self.task_settings.current()

        entries = []
        for key in task_rules.ordered_keys(progress):
            entries.append({
                "key": key,
                "done": progress[key] is True,
                "available": task_rules.is_task_available(key, progress),
                "requirement": requirements.requirement_for(key),
            })

        view = task.model_copy(update={"progress": progress})
        return {
            "task": view,
            "entries": entries,
            "percentage": task_rules.progress_percentage(view),
        }

    def delete_task(self, user: SessionUser, task_id: str) -> None:
        task = self.get_task_by_id(task_id)
        if task.user_id != user.id:
            raise ForbiddenError("Not authorized to delete this task")
        self.tasks.delete(task_id)

    def admin_delete_task(self, task_id: str) -> None:
        if not self.tasks.delete(task_id):
            raise NotFoundError("Task not found")


_task_service: Optional[TaskService] = None


def get_task_service() -> TaskService:
    global _task_service
    if _task_service is None:
        _task_service = TaskService()
    return _task_service
