"""
Task Settings Service
The admin-defined purchase requirement for every task slot

Author: TM3
Date: 2026-03-02
"""
import logging
from typing import Dict, List, Optional

from storefront.core.config import settings as app_settings
from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.domain.task import TASK_SETTINGS_ID, TaskItem, TaskSettings, empty_settings
from storefront.repositories.task_repository import TaskSettingsRepository

logger = logging.getLogger(__name__)


class TaskSettingsService:

    def __init__(self, repository: Optional[TaskSettingsRepository] = None):
        self.repository = repository or TaskSettingsRepository()

    def get_empty_task_settings(self) -> Dict[str, TaskItem]:
        return empty_settings(app_settings.TASK_SLOTS)

    def create_task_settings(
        self,
        settings: Optional[Dict[str, TaskItem]] = None,
        settings_id: str = TASK_SETTINGS_ID
    ) -> TaskSettings:
        if self.repository.find_by_id(settings_id) is not None:
            raise ConflictError("Task settings already exist")
        created = self.repository.create(settings_id, settings or self.get_empty_task_settings())
        logger.info(f"Created task settings {settings_id}")
        return created

    def get_all_task_settings(self) -> List[TaskSettings]:
        return self.repository.find_all()

    def get_task_settings_by_id(self, settings_id: str = TASK_SETTINGS_ID) -> TaskSettings:
        found = self.repository.find_by_id(settings_id)
        if found is None:
            raise NotFoundError("Task settings not found")
        return found

    def get_or_create_task_settings(self) -> TaskSettings:
        found = self.repository.find_by_id(TASK_SETTINGS_ID)
        if found is not None:
            return found
        return self.repository.create(TASK_SETTINGS_ID, self.get_empty_task_settings())

    def update_task_settings(self, settings_id: str, settings: Dict[str, TaskItem]) -> TaskSettings:
        updated = self.repository.update(settings_id, settings)
        if updated is None:
            raise NotFoundError("Task settings not found")
        return updated

    def update_specific_task(self, settings_id: str, task_key: str, item: TaskItem) -> TaskSettings:
        if not task_key.startswith("task") and not task_key.startswith("paywall"):
            raise ValidationError(f"Unknown task key {task_key}")
        current = self.get_task_settings_by_id(settings_id)
        merged = dict(current.settings)
        merged[task_key] = item
        return self.update_task_settings(settings_id, merged)

    def delete_task_settings(self, settings_id: str) -> None:
        if not self.repository.delete(settings_id):
            raise NotFoundError("Task settings not found")

    def admin_delete_task_settings(self, settings_id: str) -> None:
        self.delete_task_settings(settings_id)

    def current(self) -> TaskSettings:
        """Active settings, or an empty document when none were saved yet"""
        found = self.repository.find_by_id(TASK_SETTINGS_ID)
        return found or TaskSettings(settings={})

    def requirement_for(self, task_key: str) -> TaskItem:
        return self.current().requirement_for(task_key)

    def required_amount_for(self, product_id: str) -> Optional[int]:
        return self.current().required_amount_for(product_id)


_task_settings_service: Optional[TaskSettingsService] = None


def get_task_settings_service() -> TaskSettingsService:
    global _task_settings_service
    if _task_settings_service is None:
        _task_settings_service = TaskSettingsService()
    return _task_settings_service
