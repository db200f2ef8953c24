"""
Shipment Repositories - shipment automations and shipments

Author: TM3
Date: 2026-03-02
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from storefront.domain.shipment import AutomationRule, Shipment, ShipmentAutomation
from storefront.repositories.base import BaseRepository


class ShipmentAutomationRepository(BaseRepository):
    """Repository for shipment automations (ordered progress steps)"""

    table = "shipment_automations"
    columns = "id, user_id, name, progress"
    writable_columns = frozenset({"user_id", "name", "progress"})
    json_columns = frozenset({"progress"})

    @staticmethod
    def _map_row(row: dict) -> ShipmentAutomation:
        return ShipmentAutomation(
            id=str(row['id']),
            user_id=str(row['user_id']) if row.get('user_id') else None,
            name=row['name'],
            progress=row.get('progress') or []
        )

    @staticmethod
    def _serialize(rules: List[AutomationRule]) -> List[dict]:
        return [rule.model_dump() for rule in rules]

    def create(self, user_id: Optional[str], name: str, rules: List[AutomationRule]) -> ShipmentAutomation:
        row = self._insert({"user_id": user_id, "name": name, "progress": self._serialize(rules)})
        return self._map_row(row)

    def find_by_id(self, automation_id: str) -> Optional[ShipmentAutomation]:
        row = self._find_by_id(automation_id)
        return self._map_row(row) if row else None

    def find_all(self, limit: int = 10) -> List[ShipmentAutomation]:
        rows = self._fetch_all(f"""
            SELECT {self.columns}
            FROM shipment_automations
            ORDER BY name
            LIMIT %s
        """, (limit,))
        return [self._map_row(row) for row in rows]

    def find_by_user(self, user_id: str) -> List[ShipmentAutomation]:
        rows = self._fetch_all(f"""
            SELECT {self.columns}
            FROM shipment_automations
            WHERE user_id = %s
            ORDER BY name
        """, (user_id,))
        return [self._map_row(row) for row in rows]

    def update(self, automation_id: str, fields: Dict[str, Any]) -> Optional[ShipmentAutomation]:
        if fields.get("progress") is not None:
            fields = dict(fields)
            fields["progress"] = [
                rule.model_dump() if isinstance(rule, AutomationRule) else rule
                for rule in fields["progress"]
            ]
        row = self._update(automation_id, fields)
        return self._map_row(row) if row else None

    def delete(self, automation_id: str) -> bool:
        return self._delete(automation_id)


class ShipmentRepository(BaseRepository):
    """Repository for shipments, newest order date first"""

    table = "shipments"
    columns = "id, user_id, shipment_automation_id, customer_name, product_id, order_date"
    writable_columns = frozenset({"user_id", "shipment_automation_id", "customer_name", "product_id", "order_date"})

    @staticmethod
    def _map_row(row: dict) -> Shipment:
        return Shipment(
            id=str(row['id']),
            user_id=str(row['user_id']),
            shipment_automation_id=str(row['shipment_automation_id']) if row.get('shipment_automation_id') else None,
            customer_name=row.get('customer_name') or "",
            product_id=str(row['product_id']),
            order_date=row['order_date']
        )

    def _select(self, where_clause: str = "1=1", params=(), limit: Optional[int] = None) -> List[Shipment]:
        query = f"""
            SELECT {self.columns}
            FROM shipments
            WHERE {where_clause}
            ORDER BY order_date DESC
        """
        if limit is not None:
            query += " LIMIT %s"
            params = tuple(params) + (limit,)
        return [self._map_row(row) for row in self._fetch_all(query, params)]

    def create(self, user_id: str, values: Dict[str, Any]) -> Shipment:
        values = dict(values)
        values["user_id"] = user_id
        if values.get("order_date") is None:
            values.pop("order_date", None)
            row = self._insert(values, extra_sql={"order_date": "NOW()"})
        else:
            row = self._insert(values)
        return self._map_row(row)

    def find_by_id(self, shipment_id: str) -> Optional[Shipment]:
        row = self._find_by_id(shipment_id)
        return self._map_row(row) if row else None

    def find_all(self, limit: int = 10000) -> List[Shipment]:
        return self._select(limit=limit)

    def find_by_user(self, user_id: str) -> List[Shipment]:
        return self._select("user_id = %s", (user_id,))

    def find_by_product(self, product_id: str) -> List[Shipment]:
        return self._select("product_id = %s", (product_id,))

    def find_since(self, since: datetime) -> List[Shipment]:
        return self._select("order_date >= %s", (since,))

    def update(self, shipment_id: str, fields: Dict[str, Any]) -> Optional[Shipment]:
        row = self._update(shipment_id, fields)
        return self._map_row(row) if row else None

    def delete(self, shipment_id: str) -> bool:
        return self._delete(shipment_id)
