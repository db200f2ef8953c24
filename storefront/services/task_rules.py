"""
Task Rules
Pure functions behind the task board: unlocking, progress and purchase requirements

Task keys look like `task7`; optional checkpoints look like `paywall3`.
A paywall numbered N must be cleared before any task numbered above N.

Author: TM3
Date: 2026-03-02
"""
import re
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from storefront.core.config import settings
from storefront.core.timeutil import is_same_day
from storefront.domain.order import Order
from storefront.domain.sale import Sale
from storefront.domain.task import PAYWALL_PREFIX, Task, TaskItem

_KEY_NUMBER = re.compile(r"^(task|paywall)(\d+)$")


def key_number(key: str) -> Optional[int]:
    match = _KEY_NUMBER.match(key)
    return int(match.group(2)) if match else None


def _sort_key(key: str):
    number = key_number(key)
    return (number is None, number if number is not None else 0, key)


def ordered_task_keys(progress: Dict[str, bool]) -> List[str]:
    """Non-paywall keys in numeric order (jsonb does not keep insertion order)"""
    return sorted((k for k in progress if not k.startswith(PAYWALL_PREFIX)), key=_sort_key)


def ordered_keys(progress: Dict[str, bool]) -> List[str]:
    return sorted(progress.keys(), key=_sort_key)


def is_task_available(task_key: str, progress: Dict[str, bool]) -> bool:
    """
    Whether a task can be started.

    - Paywalls are always available
    - task1 is always available, and taskN is once task(N-1) is done
    - Otherwise the previous task in order must be done and every paywall
      numbered below this task must be cleared
    """
    if task_key.startswith(PAYWALL_PREFIX):
        return True

    number = key_number(task_key)
    if number is not None:
        if number == 1:
            return True
        if progress.get(f"task{number - 1}") is True:
            return True

    task_keys = ordered_task_keys(progress)
    current_index = task_keys.index(task_key) if task_key in task_keys else -1

    if current_index == 0:
        return True

    if current_index > 0 and progress.get(task_keys[current_index - 1]) is not True:
        return False

    all_keys = ordered_keys(progress)
    for paywall_key in (k for k in progress if k.startswith(PAYWALL_PREFIX)):
        paywall_number = key_number(paywall_key)
        if paywall_number is not None and number is not None:
            blocks = paywall_number < number
        else:
            position = all_keys.index(task_key) if task_key in all_keys else -1
            blocks = all_keys.index(paywall_key) < position
        if blocks and progress.get(paywall_key) is not True:
            return False

    return True


def progress_percentage(task: Optional[Task]) -> int:
    """Share of completed entries, rounded to a whole percent"""
    if task is None or not task.progress:
        return 0
    completed = sum(1 for done in task.progress.values() if done is True)
    return round(completed / len(task.progress) * 100)


def has_completed_task_requirement(
    task_key: str,
    orders: Optional[Iterable[Order]],
    requirement_for: Callable[[str], Optional[TaskItem]],
    now: Optional[datetime] = None
) -> bool:
    """
    A task with a product requirement is met by an order of that product
    placed today with at least the required amount.
    """
    if orders is None:
        return False

    requirement = requirement_for(task_key)
    if requirement is None or not requirement.product_id:
        return True

    required = requirement.required_amount
    for order in orders:
        if not is_same_day(order.ordered_at, now):
            continue
        if order.product_id != requirement.product_id:
            continue
        if required is None or order.amount >= required:
            return True
    return False


def is_trial_bonus_date_today(sale: Optional[Sale], now: Optional[datetime] = None) -> bool:
    if sale is None:
        return False
    return is_same_day(sale.trial_bonus_date, now)


def format_currency(amount: Optional[float]) -> str:
    if amount is None:
        return f"{settings.CURRENCY_SYMBOL} 0.00"
    return f"{settings.CURRENCY_SYMBOL} {float(amount):.2f}"
