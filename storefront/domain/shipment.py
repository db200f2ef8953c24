"""
Shipment Domain Models

A shipment automation is an ordered list of named steps, each reached a
number of hours after the order date. Shipments reference an automation
to show their current step.

Author: TM3
Date: 2026-03-02
"""
import json
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AutomationRule(BaseModel):
    """One step of a shipment automation"""
    name: str = Field(..., min_length=1)
    after_hour: float = Field(..., ge=0)


class ShipmentAutomation(BaseModel):
    id: str
    user_id: Optional[str] = None
    name: str
    progress: List[AutomationRule] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @field_validator("progress", mode="before")
    @classmethod
    def parse_progress(cls, value):
        if isinstance(value, str):
            return json.loads(value) if value.strip() else []
        return value or []


class ShipmentAutomationCreate(BaseModel):
    name: str = Field(..., min_length=1)
    progress: List[AutomationRule] = Field(default_factory=list)


class ShipmentAutomationUpdate(BaseModel):
    name: Optional[str] = None
    progress: Optional[List[AutomationRule]] = None


class AutomationProgressUpdate(BaseModel):
    progress: List[AutomationRule]


class Shipment(BaseModel):
    id: str
    user_id: str
    shipment_automation_id: Optional[str] = None
    customer_name: str = ""
    product_id: str
    order_date: datetime

    model_config = ConfigDict(from_attributes=True)


class ShipmentCreate(BaseModel):
    shipment_automation_id: Optional[str] = None
    customer_name: str = ""
    product_id: str
    order_date: Optional[datetime] = None


class ShipmentUpdate(BaseModel):
    shipment_automation_id: Optional[str] = None
    customer_name: Optional[str] = None
    product_id: Optional[str] = None
    order_date: Optional[datetime] = None
