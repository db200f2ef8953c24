"""
Sale Domain Model

One wallet-and-stats record per customer: balance, trial bonus,
daily cashback and completed task count.

Author: TM3
Date: 2026-03-02
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.core.timeutil import utc_date


class Sale(BaseModel):
    """
    Customer wallet and sales statistics

    Fields:
        balance: Spendable money
        trial_bonus: Extra funds usable only on trial_bonus_date
        today_bonus: Cashback earned on today_bonus_date
        total_earning: Lifetime cashback
        task_complete: Number of completed tasks
        total_sales: Lifetime sales amount
    """
    id: str
    user_id: str
    balance: float = 0
    number_of_rating: int = 0
    total_earning: float = 0
    trial_balance: Optional[float] = None
    trial_bonus: float = 0
    trial_bonus_date: Optional[datetime] = None
    today_bonus: float = 0
    today_bonus_date: Optional[datetime] = None
    task_complete: int = 0
    total_sales: float = 0

    model_config = ConfigDict(from_attributes=True)

    def trial_bonus_active(self, today: date) -> bool:
        return self.trial_bonus_date is not None and utc_date(self.trial_bonus_date) == today

    def available_funds(self, today: date) -> float:
        """Balance plus the trial bonus when the bonus belongs to today"""
        if self.trial_bonus_active(today):
            return (self.trial_bonus or 0) + (self.balance or 0)
        return self.balance or 0


class SaleCreate(BaseModel):
    user_id: str
    balance: float = 0
    number_of_rating: int = 0
    total_earning: float = 0
    trial_balance: Optional[float] = None
    trial_bonus: float = 0
    trial_bonus_date: Optional[datetime] = None
    today_bonus: float = 0
    today_bonus_date: Optional[datetime] = None
    task_complete: int = 0
    total_sales: float = 0


class SaleUpdate(BaseModel):
    balance: Optional[float] = None
    number_of_rating: Optional[int] = Field(None, ge=0)
    total_earning: Optional[float] = None
    trial_balance: Optional[float] = None
    trial_bonus: Optional[float] = None
    trial_bonus_date: Optional[datetime] = None
    today_bonus: Optional[float] = None
    today_bonus_date: Optional[datetime] = None
    task_complete: Optional[int] = Field(None, ge=0)
    total_sales: Optional[float] = None


class TotalSalesIncrement(BaseModel):
    amount: float
