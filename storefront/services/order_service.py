"""
Order Service
Customer orders plus the admin views of them

Author: TM3
Date: 2026-03-02
"""
import logging
from typing import Dict, List, Optional

from storefront.core.auth import SessionUser
from storefront.core.config import settings
from storefront.core.errors import ForbiddenError, NotFoundError
from storefront.domain.order import Order, OrderCreate, OrderUpdate
from storefront.repositories.order_repository import OrderRepository
from storefront.services.product_service import ProductService, get_product_service

logger = logging.getLogger(__name__)


class OrderService:

    def __init__(
        self,
        orders: Optional[OrderRepository] = None,
        products: Optional[ProductService] = None
    ):
        self.orders = orders or OrderRepository()
        self.products = products or get_product_service()

    def create_order(self, user: SessionUser, data: OrderCreate) -> Order:
        order = self.orders.create(user.id, data)
        logger.info(f"Order {order.id}: user {user.id} bought {order.amount} x {order.product_id}")
        return order

    def get_orders(self, limit: int = 10) -> List[Order]:
        return self.orders.find_all(limit=limit)

    def get_order_by_id(self, order_id: str) -> Order:
        order = self.orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def get_user_orders(self, user: SessionUser) -> List[Order]:
        return self.orders.find_by_user(user.id)

    def _owned(self, user: SessionUser, order_id: str, action: str) -> Order:
        order = self.get_order_by_id(order_id)
        if order.user_id != user.id:
            raise ForbiddenError(f"Not authorized to {action} this order")
        return order

    def update_order(self, user: SessionUser, order_id: str, data: OrderUpdate) -> Order:
        self._owned(user, order_id, "update")
        return self.orders.update(order_id, data.model_dump(exclude_unset=True))

    def delete_order(self, user: SessionUser, order_id: str) -> None:
        self._owned(user, order_id, "delete")
        self.orders.delete(order_id)

    def add_shipment_to_order(self, order_id: str, shipment_automation_id: str) -> Order:
        order = self.orders.update(order_id, {"shipment_automation_id": shipment_automation_id})
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def update_order_status(self, order_id: str, status: str) -> Order:
        order = self.orders.update(order_id, {"status": status})
        if order is None:
            raise NotFoundError("Order not found")
        logger.info(f"Order {order_id} status -> {status}")
        return order

    def admin_get_all_orders(self, limit: int = 100) -> List[Order]:
        return self.orders.find_all(limit=limit)

    def admin_delete_order(self, order_id: str) -> None:
        if not self.orders.delete(order_id):
            raise NotFoundError("Order not found")

    def describe_orders(self, orders: List[Order]) -> List[Dict]:
        """
        Orders joined with their product for display

        Each entry carries the discounted unit price, the order total and
        the commission (cashback rate of the total).
        """
        products = self.products.get_products_by_ids([order.product_id for order in orders])
        lines = []
        for order in orders:
            product = products.get(order.product_id)
            unit_price = product.final_price if product else 0
            total = unit_price * order.amount
            lines.append({
                "order": order,
                "product": product,
                "unit_price": unit_price,
                "total": total,
                "commission": total * settings.CASHBACK_RATE,
            })
        return lines


_order_service: Optional[OrderService] = None


def get_order_service() -> OrderService:
    global _order_service
    if _order_service is None:
        _order_service = OrderService()
    return _order_service
