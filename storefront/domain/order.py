"""
Order Domain Model

An order is one product bought by one customer. `amount` is the number
of units; money is derived from the product price at display time.

Author: TM3
Date: 2026-03-02
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.core.timeutil import utc_date


class Order(BaseModel):
    """Order placed by a customer"""
    id: str
    user_id: str
    product_id: str
    amount: int = Field(..., ge=1, description="Units ordered")
    shipment_automation_id: Optional[str] = None
    status: Optional[str] = None
    ordered_at: datetime

    model_config = ConfigDict(from_attributes=True)

    def placed_on(self, day) -> bool:
        """True when the order was placed on the given calendar date"""
        return utc_date(self.ordered_at) == day


class OrderCreate(BaseModel):
    product_id: str
    amount: int = Field(..., ge=1)
    shipment_automation_id: Optional[str] = None


class OrderUpdate(BaseModel):
    amount: Optional[int] = Field(None, ge=1)
    shipment_automation_id: Optional[str] = None
    status: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: str = Field(..., min_length=1)
