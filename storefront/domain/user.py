"""
User Domain Model

Users live in Supabase Auth. Roles are labels stored in app_metadata,
display name in user_metadata, preferences (referral code) alongside it.

Author: TM3
Date: 2026-03-02
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Label(str, Enum):
    """Role labels attached to a user"""
    CUSTOMER = "CUSTOMER"
    SELLER = "SELLER"
    ADMIN = "ADMIN"
    SUPERADMIN = "SUPERADMIN"


class User(BaseModel):
    """Account as seen by the storefront"""
    id: str
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    labels: List[str] = Field(default_factory=list)
    prefs: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None

    def has_label(self, label: str) -> bool:
        return label in self.labels

    @property
    def referral_code(self) -> Optional[str]:
        return self.prefs.get("referral_code")

    def to_dict(self) -> dict:
        data = self.model_dump()
        data["referral_code"] = self.referral_code
        return data


class SignUpRequest(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=6)
    password: str = Field(..., min_length=8)
    confirm_password: str
    referral_code: str = Field(..., min_length=6, max_length=6)


class SignInRequest(BaseModel):
    phone: str
    password: str


class UserInfoUpdate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str


class PasswordUpdate(BaseModel):
    password: str = Field(..., min_length=8)


class AdminCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str
    password: str = Field(..., min_length=8)


class AccountUpdate(BaseModel):
    """Admin or seller edit: name always, phone and password when given"""
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    password: Optional[str] = Field(None, min_length=8)


class SellerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: str
    password: str = Field(..., min_length=8)
    confirm_password: str
