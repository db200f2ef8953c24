"""
Product Domain Model

Represents a product entity in the storefront catalog.
This is the single source of truth for product data structure.

Author: TM3
Date: 2026-03-02
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def apply_discount(price: float, discount_rate: float) -> float:
    """Price after a percentage discount"""
    return price - price * (discount_rate or 0) / 100


class Product(BaseModel):
    """
    Product domain model - represents a product in our catalog

    Fields:
        id: Product ID (uuid text)
        name: Product name
        description: Product description
        image_urls: Storage file ids of the product images, in display order
        quantity: Units in stock
        price: List price
        discount_rate: Discount in percent (0-100)
        created_at: When product was created
    """

    id: str = Field(..., description="Product ID")
    name: str = Field(..., description="Product name")
    description: str = Field("", description="Product description")
    image_urls: List[str] = Field(default_factory=list, description="Storage ids of product images")
    quantity: int = Field(0, description="Units in stock")
    price: float = Field(0, description="List price", ge=0)
    discount_rate: float = Field(0, description="Discount percent", ge=0, le=100)
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)

    @property
    def final_price(self) -> float:
        """Price after discount"""
        return apply_discount(self.price, self.discount_rate)

    @property
    def is_out_of_stock(self) -> bool:
        return self.quantity <= 0

    @property
    def cover_image(self) -> Optional[str]:
        return self.image_urls[0] if self.image_urls else None

    def to_dict(self) -> dict:
        """Convert to dictionary with computed fields"""
        data = self.model_dump()
        data['final_price'] = round(self.final_price, 2)
        data['is_out_of_stock'] = self.is_out_of_stock
        return data


class _LegacyImageMixin(BaseModel):
    """Older clients send a single image_url; fold it into image_urls"""

    @model_validator(mode="before")
    @classmethod
    def fold_legacy_image_url(cls, data):
        if isinstance(data, dict) and data.get("image_url"):
            data = dict(data)
            legacy = data.pop("image_url")
            urls = list(data.get("image_urls") or [])
            if legacy not in urls:
                urls.insert(0, legacy)
            data["image_urls"] = urls
        elif isinstance(data, dict) and "image_url" in data:
            data = dict(data)
            data.pop("image_url")
        return data


class ProductCreate(_LegacyImageMixin):
    """Schema for creating a new product"""
    name: str = Field(..., min_length=1)
    description: str = ""
    image_urls: List[str] = Field(default_factory=list)
    quantity: int = Field(0, ge=0)
    price: float = Field(..., ge=0)
    discount_rate: float = Field(0, ge=0, le=100)


class ProductUpdate(_LegacyImageMixin):
    """Schema for updating an existing product"""
    name: Optional[str] = None
    description: Optional[str] = None
    image_urls: Optional[List[str]] = None
    quantity: Optional[int] = Field(None, ge=0)
    price: Optional[float] = Field(None, ge=0)
    discount_rate: Optional[float] = Field(None, ge=0, le=100)
