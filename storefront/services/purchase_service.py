"""
Purchase Service
Buying a product from the task board

Funds are checked against the wallet, stock is taken, the cashback is
credited and the order is recorded. The purchase price itself is not
debited from the balance; the wallet only grows by the cashback.

Author: TM3
Date: 2026-03-02
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from storefront.core.auth import SessionUser
from storefront.core.config import settings
from storefront.core.errors import StorefrontError, ValidationError
from storefront.core.timeutil import utc_date, utcnow
from storefront.domain.order import Order, OrderCreate
from storefront.domain.product import Product
from storefront.domain.sale import Sale
from storefront.repositories.order_repository import OrderRepository
from storefront.services.product_service import ProductService, get_product_service
from storefront.services.sale_service import SaleService, get_sale_service
from storefront.services.task_settings_service import TaskSettingsService, get_task_settings_service

logger = logging.getLogger(__name__)

INSUFFICIENT_BALANCE = "Insufficient balance. Please topup via Customer Service"


@dataclass
class PurchaseResult:
    product: Product
    sale: Sale
    cost: float
    cashback: float
    order: Optional[Order] = None


class PurchaseService:

    def __init__(
        self,
        products: Optional[ProductService] = None,
        sales: Optional[SaleService] = None,
        task_settings: Optional[TaskSettingsService] = None,
        orders: Optional[OrderRepository] = None
    ):
        self.products = products or get_product_service()
        self.sales = sales or get_sale_service()
        self.task_settings = task_settings or get_task_settings_service()
        self.orders = orders or OrderRepository()

    def purchase(
        self,
        user: SessionUser,
        product_id: str,
        quantity: int,
        now: Optional[datetime] = None
    ) -> PurchaseResult:
        now = now or utcnow()
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        product = self.products.get_product_by_id(product_id)
        sale = self.sales.require_user_sale(user.id)

        cost = product.final_price * quantity
        if sale.available_funds(utc_date(now)) < cost:
            raise ValidationError(INSUFFICIENT_BALANCE)

        required = self.task_settings.required_amount_for(product_id)
        if required is not None and quantity != required:
            raise ValidationError(f"You must purchase exactly {required} units to complete this task.")

        stocked = self.products.take_stock(product_id, quantity)
        if stocked is None:
            raise ValidationError("Insufficient stock")

        cashback = round(cost * settings.CASHBACK_RATE, 2)
        sale = self.sales.add_cashback(sale.id, cashback, now)

        order = None
        try:
            order = self.orders.create(user.id, OrderCreate(product_id=product_id, amount=quantity))
        except StorefrontError as e:
            logger.error(f"Error creating order for user {user.id}, product {product_id}: {e.message}")

        logger.info(f"User {user.id} purchased {quantity} x {product_id} for {cost}, cashback {cashback}")
        return PurchaseResult(product=stocked, sale=sale, cost=cost, cashback=cashback, order=order)


_purchase_service: Optional[PurchaseService] = None


def get_purchase_service() -> PurchaseService:
    global _purchase_service
    if _purchase_service is None:
        _purchase_service = PurchaseService()
    return _purchase_service
