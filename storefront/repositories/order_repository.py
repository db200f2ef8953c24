"""
Order Repository - Data Access Layer for Orders

Author: TM3
Date: 2026-03-02
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from storefront.domain.order import Order, OrderCreate
from storefront.repositories.base import BaseRepository


class OrderRepository(BaseRepository):
    """Repository for Order data access, newest orders first"""

    table = "orders"
    columns = "id, user_id, product_id, amount, shipment_automation_id, status, ordered_at"
    writable_columns = frozenset({"user_id", "product_id", "amount", "shipment_automation_id", "status"})

    @staticmethod
    def _map_row_to_order(row: dict) -> Order:
        return Order(
            id=str(row['id']),
            user_id=str(row['user_id']),
            product_id=str(row['product_id']),
            amount=row['amount'],
            shipment_automation_id=row.get('shipment_automation_id') or None,
            status=row.get('status'),
            ordered_at=row['ordered_at']
        )

    def create(self, user_id: str, data: OrderCreate) -> Order:
        values = data.model_dump()
        values["user_id"] = user_id
        if not values.get("shipment_automation_id"):
            values["shipment_automation_id"] = None
        row = self._insert(values, extra_sql={"ordered_at": "NOW()"})
        return self._map_row_to_order(row)

    def find_by_id(self, order_id: str) -> Optional[Order]:
        row = self._find_by_id(order_id)
        return self._map_row_to_order(row) if row else None

    def find_all(self, limit: int = 10) -> List[Order]:
        rows = self._fetch_all(f"""
            SELECT {self.columns}
            FROM orders
            ORDER BY ordered_at DESC
            LIMIT %s
        """, (limit,))
        return [self._map_row_to_order(row) for row in rows]

    def find_by_user(self, user_id: str) -> List[Order]:
        rows = self._fetch_all(f"""
            SELECT {self.columns}
            FROM orders
            WHERE user_id = %s
            ORDER BY ordered_at DESC
        """, (user_id,))
        return [self._map_row_to_order(row) for row in rows]

    def find_by_user_since(self, user_id: str, since: datetime) -> List[Order]:
        """Orders of a user placed at or after `since`"""
        rows = self._fetch_all(f"""
            SELECT {self.columns}
            FROM orders
            WHERE user_id = %s AND ordered_at >= %s
            ORDER BY ordered_at DESC
        """, (user_id, since))
        return [self._map_row_to_order(row) for row in rows]

    def update(self, order_id: str, fields: Dict[str, Any]) -> Optional[Order]:
        row = self._update(order_id, fields)
        return self._map_row_to_order(row) if row else None

    def delete(self, order_id: str) -> bool:
        return self._delete(order_id)
