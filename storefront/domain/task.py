"""
Task Domain Models

A customer's daily task board (task1..taskN, optionally paywallN
checkpoints) and the admin-defined settings that tie each task to a
product purchase.

Author: TM3
Date: 2026-03-02
"""
import json
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TASK_PREFIX = "task"
PAYWALL_PREFIX = "paywall"
TASK_SETTINGS_ID = "task-settings"


def default_progress(slots: int = 36) -> Dict[str, bool]:
    """Fresh progress map: task1..task{slots} all incomplete"""
    return {f"{TASK_PREFIX}{i}": False for i in range(1, slots + 1)}


def _parse_json(value):
    # Older rows stored these maps as JSON strings
    if isinstance(value, str):
        return json.loads(value) if value.strip() else {}
    return value


class Task(BaseModel):
    """Task progress of one customer"""
    id: str
    user_id: str
    progress: Dict[str, bool] = Field(default_factory=default_progress)
    allow_system_reset: bool = False
    last_edit: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("progress", mode="before")
    @classmethod
    def parse_progress(cls, value):
        return _parse_json(value)


class TaskCreate(BaseModel):
    progress: Optional[Dict[str, bool]] = None
    allow_system_reset: bool = False


class TaskUpdate(BaseModel):
    progress: Optional[Dict[str, bool]] = None
    allow_system_reset: Optional[bool] = None


class TaskProgressUpdate(BaseModel):
    progress: Dict[str, bool]


class TaskItem(BaseModel):
    """Purchase requirement of one task slot; empty product_id means none"""
    product_id: str = ""
    amount: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def amount_as_text(cls, value):
        if value is None:
            return ""
        return str(value)

    @property
    def required_amount(self) -> Optional[int]:
        if not self.amount.strip():
            return None
        try:
            return int(float(self.amount))
        except ValueError:
            return None

    @property
    def has_requirement(self) -> bool:
        return bool(self.product_id)


def empty_settings(slots: int = 36) -> Dict[str, TaskItem]:
    return {f"{TASK_PREFIX}{i}": TaskItem() for i in range(1, slots + 1)}


class TaskSettings(BaseModel):
    """Singleton document mapping task keys to purchase requirements"""
    id: str = TASK_SETTINGS_ID
    settings: Dict[str, TaskItem] = Field(default_factory=dict)

    @field_validator("settings", mode="before")
    @classmethod
    def parse_settings(cls, value):
        return _parse_json(value)

    def requirement_for(self, task_key: str) -> TaskItem:
        return self.settings.get(task_key) or TaskItem()

    def required_amount_for(self, product_id: str) -> Optional[int]:
        """Units the settings demand for a product, if any task names it"""
        for item in self.settings.values():
            if item.product_id == product_id and item.required_amount:
                return item.required_amount
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "settings": {key: item.model_dump() for key, item in self.settings.items()}
        }


class TaskSettingsWrite(BaseModel):
    settings: Dict[str, TaskItem]
