"""
Referral Code Domain Model

Six digit codes that admins hand out. `belongs_to` is the owning admin;
`user_id` is set once a code has been redeemed as single-use.

Author: TM3
Date: 2026-03-02
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

CODE_MIN = 100000
CODE_MAX = 999999


class ReferralCode(BaseModel):
    id: str
    code: str = Field(..., pattern=r"^\d{6}$")
    belongs_to: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_redeemed(self) -> bool:
        return bool(self.user_id)


class ReferralCodeCreate(BaseModel):
    belongs_to: Optional[str] = None


class ReferralCodeUpdate(BaseModel):
    belongs_to: Optional[str] = None
    user_id: Optional[str] = None
