"""
Sale Repository - customer wallets and sales statistics

Author: TM3
Date: 2026-03-02
"""
from typing import Any, Dict, List, Optional

from storefront.domain.sale import Sale, SaleCreate
from storefront.repositories.base import BaseRepository

NUMERIC_COLUMNS = frozenset({
    "balance", "number_of_rating", "total_earning", "trial_balance",
    "trial_bonus", "today_bonus", "task_complete", "total_sales",
})


class SaleRepository(BaseRepository):
    """Repository for Sale data access"""

    table = "sales"
    columns = (
        "id, user_id, balance, number_of_rating, total_earning, trial_balance, "
        "trial_bonus, trial_bonus_date, today_bonus, today_bonus_date, task_complete, total_sales"
    )
    writable_columns = NUMERIC_COLUMNS | {"user_id", "trial_bonus_date", "today_bonus_date"}

    @staticmethod
    def _map_row_to_sale(row: dict) -> Sale:
        return Sale(
            id=str(row['id']),
            user_id=str(row['user_id']),
            balance=row.get('balance') or 0,
            number_of_rating=row.get('number_of_rating') or 0,
            total_earning=row.get('total_earning') or 0,
            trial_balance=row.get('trial_balance'),
            trial_bonus=row.get('trial_bonus') or 0,
            trial_bonus_date=row.get('trial_bonus_date'),
            today_bonus=row.get('today_bonus') or 0,
            today_bonus_date=row.get('today_bonus_date'),
            task_complete=row.get('task_complete') or 0,
            total_sales=row.get('total_sales') or 0
        )

    def create(self, data: SaleCreate) -> Sale:
        row = self._insert(data.model_dump())
        return self._map_row_to_sale(row)

    def find_by_id(self, sale_id: str) -> Optional[Sale]:
        row = self._find_by_id(sale_id)
        return self._map_row_to_sale(row) if row else None

    def find_all(self, limit: int = 10000) -> List[Sale]:
        rows = self._fetch_all(f"""
            SELECT {self.columns}
            FROM sales
            ORDER BY total_sales DESC
            LIMIT %s
        """, (limit,))
        return [self._map_row_to_sale(row) for row in rows]

    def find_by_user(self, user_id: str) -> List[Sale]:
        rows = self._fetch_all(f"""
            SELECT {self.columns}
            FROM sales
            WHERE user_id = %s
        """, (user_id,))
        return [self._map_row_to_sale(row) for row in rows]

    def update(self, sale_id: str, fields: Dict[str, Any]) -> Optional[Sale]:
        row = self._update(sale_id, fields)
        return self._map_row_to_sale(row) if row else None

    def increment(
        self,
        sale_id: str,
        deltas: Dict[str, float],
        values: Optional[Dict[str, Any]] = None
    ) -> Optional[Sale]:
        """
        Add to numeric columns atomically, optionally setting other columns

        Args:
            sale_id: Sale record
            deltas: column -> amount to add (numeric columns only)
            values: column -> new value
        """
        extra_sql = {}
        params: List[Any] = []
        for column, delta in deltas.items():
            if column not in NUMERIC_COLUMNS:
                raise ValueError(f"Cannot increment column {column}")
            extra_sql[column] = f"COALESCE({column}, 0) + %s"
            params.append(delta)

        values = self._filter_writable(values or {})
        assignments = [f"{column} = {expr}" for column, expr in extra_sql.items()]
        assignments += [f"{column} = %s" for column in values.keys()]
        if not assignments:
            return self.find_by_id(sale_id)
        params += list(values.values())
        params.append(sale_id)

        row = self._write(f"""
            UPDATE sales
            SET {", ".join(assignments)}
            WHERE id = %s
            RETURNING {self.columns}
        """, params)
        return self._map_row_to_sale(row) if row else None

    def delete(self, sale_id: str) -> bool:
        return self._delete(sale_id)
