"""
Withdrawal Domain Model

Author: TM3
Date: 2026-03-02
"""
from datetime import datetime
from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WithdrawalStatus(IntEnum):
    PENDING = 1
    APPROVED = 2
    REJECTED = 3


class Withdrawal(BaseModel):
    """Customer request to cash out part of the balance"""
    id: str
    user_id: str
    withdraw_amount: float
    requested_at: datetime
    status: WithdrawalStatus = WithdrawalStatus.PENDING

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_pending(self) -> bool:
        return self.status == WithdrawalStatus.PENDING

    def to_dict(self) -> dict:
        data = self.model_dump()
        data["status"] = int(self.status)
        data["status_label"] = self.status.name.lower()
        return data


class WithdrawalCreate(BaseModel):
    withdraw_amount: float


class WithdrawalUpdate(BaseModel):
    withdraw_amount: Optional[float] = Field(None, gt=0)


class WithdrawalStatusUpdate(BaseModel):
    status: WithdrawalStatus
