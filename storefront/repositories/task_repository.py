"""
Task Repository - task boards and the task settings document

Author: TM3
Date: 2026-03-02
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from storefront.domain.task import Task, TaskItem, TaskSettings
from storefront.repositories.base import BaseRepository


class TaskRepository(BaseRepository):
    """Repository for per-user task progress"""

    table = "tasks"
    columns = "id, user_id, progress, allow_system_reset, last_edit"
    writable_columns = frozenset({"user_id", "progress", "allow_system_reset", "last_edit"})
    json_columns = frozenset({"progress"})

    @staticmethod
    def _map_row_to_task(row: dict) -> Task:
        return Task(
            id=str(row['id']),
            user_id=str(row['user_id']),
            progress=row.get('progress') or {},
            allow_system_reset=bool(row.get('allow_system_reset')),
            last_edit=row['last_edit']
        )

    def create(
        self,
        user_id: str,
        progress: Dict[str, bool],
        last_edit: datetime,
        allow_system_reset: bool = False
    ) -> Task:
        row = self._insert({
            "user_id": user_id,
            "progress": progress,
            "allow_system_reset": allow_system_reset,
            "last_edit": last_edit,
        })
        return self._map_row_to_task(row)

    def find_by_id(self, task_id: str) -> Optional[Task]:
        row = self._find_by_id(task_id)
        return self._map_row_to_task(row) if row else None

    def find_all(self, limit: int = 10) -> List[Task]:
        rows = self._fetch_all(f"""
            SELECT {self.columns}
            FROM tasks
            ORDER BY last_edit DESC
            LIMIT %s
        """, (limit,))
        return [self._map_row_to_task(row) for row in rows]

    def find_by_user(self, user_id: str) -> Optional[Task]:
        row = self._fetch_one(f"""
            SELECT {self.columns}
            FROM tasks
            WHERE user_id = %s
            ORDER BY last_edit DESC
            LIMIT 1
        """, (user_id,))
        return self._map_row_to_task(row) if row else None

    def update(self, task_id: str, fields: Dict[str, Any]) -> Optional[Task]:
        row = self._update(task_id, fields)
        return self._map_row_to_task(row) if row else None

    def delete(self, task_id: str) -> bool:
        return self._delete(task_id)


class TaskSettingsRepository(BaseRepository):
    """Repository for task settings documents (normally just `task-settings`)"""

    table = "task_settings"
    columns = "id, settings"
    writable_columns = frozenset({"id", "settings"})
    json_columns = frozenset({"settings"})

    @staticmethod
    def _serialize(settings: Dict[str, TaskItem]) -> Dict[str, dict]:
        return {key: item.model_dump() for key, item in settings.items()}

    @staticmethod
    def _map_row_to_settings(row: dict) -> TaskSettings:
        return TaskSettings(id=row['id'], settings=row.get('settings') or {})

    def find_by_id(self, settings_id: str) -> Optional[TaskSettings]:
        row = self._find_by_id(settings_id)
        return self._map_row_to_settings(row) if row else None

    def find_all(self) -> List[TaskSettings]:
        rows = self._fetch_all(f"SELECT {self.columns} FROM task_settings ORDER BY id")
        return [self._map_row_to_settings(row) for row in rows]

    def create(self, settings_id: str, settings: Dict[str, TaskItem]) -> TaskSettings:
        row = self._insert({"id": settings_id, "settings": self._serialize(settings)})
        return self._map_row_to_settings(row)

    def update(self, settings_id: str, settings: Dict[str, TaskItem]) -> Optional[TaskSettings]:
        row = self._update(settings_id, {"settings": self._serialize(settings)})
        return self._map_row_to_settings(row) if row else None

    def delete(self, settings_id: str) -> bool:
        return self._delete(settings_id)
