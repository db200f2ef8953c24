"""
Withdrawal Repository - Data Access Layer for Withdrawals

Author: TM3
Date: 2026-03-02
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import psycopg2

from storefront.core.database import get_db_connection_dict
from storefront.core.errors import BackendError
from storefront.domain.withdrawal import Withdrawal, WithdrawalStatus
from storefront.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class WithdrawalRepository(BaseRepository):
    """Repository for Withdrawal data access, newest requests first"""

    table = "withdrawals"
    columns = "id, user_id, withdraw_amount, requested_at, status"
    writable_columns = frozenset({"user_id", "withdraw_amount", "status"})

    @staticmethod
    def _map_row_to_withdrawal(row: dict) -> Withdrawal:
        return Withdrawal(
            id=str(row['id']),
            user_id=str(row['user_id']),
            withdraw_amount=row['withdraw_amount'],
            requested_at=row['requested_at'],
            status=row.get('status') or WithdrawalStatus.PENDING
        )

    def create(self, user_id: str, amount: float) -> Withdrawal:
        row = self._insert(
            {"user_id": user_id, "withdraw_amount": amount, "status": int(WithdrawalStatus.PENDING)},
            extra_sql={"requested_at": "NOW()"}
        )
        return self._map_row_to_withdrawal(row)

    def find_by_id(self, withdrawal_id: str) -> Optional[Withdrawal]:
        row = self._find_by_id(withdrawal_id)
        return self._map_row_to_withdrawal(row) if row else None

    def find_all(
        self,
        limit: int = 25,
        offset: int = 0,
        keyword: Optional[str] = None,
        user_ids: Optional[Sequence[str]] = None
    ) -> Tuple[List[Withdrawal], int]:
        """
        Find withdrawals with filters

        Args:
            keyword: Match inside the requesting user id
            user_ids: Restrict to these users (an empty list matches nothing)

        Returns:
            Tuple of (list of withdrawals, total count)
        """
        conditions = []
        params: List[Any] = []

        if keyword:
            conditions.append("user_id::text ILIKE %s")
            params.append(f"%{keyword}%")

        if user_ids is not None:
            conditions.append("user_id::text = ANY(%s)")
            params.append(list(user_ids))

        where_clause = " AND ".join(conditions) if conditions else "1=1"

        rows, total = self._fetch_page(where_clause, params, "requested_at DESC", limit, offset)
        return [self._map_row_to_withdrawal(row) for row in rows], total

    def find_by_user(self, user_id: str) -> List[Withdrawal]:
        rows = self._fetch_all(f"""
            SELECT {self.columns}
            FROM withdrawals
            WHERE user_id = %s
            ORDER BY requested_at DESC
        """, (user_id,))
        return [self._map_row_to_withdrawal(row) for row in rows]

    def update(self, withdrawal_id: str, fields: Dict[str, Any]) -> Optional[Withdrawal]:
        if "status" in fields and fields["status"] is not None:
            fields = dict(fields)
            fields["status"] = int(fields["status"])
        row = self._update(withdrawal_id, fields)
        return self._map_row_to_withdrawal(row) if row else None

    def set_status_if_pending(self, withdrawal_id: str, status: WithdrawalStatus) -> Optional[Withdrawal]:
        """Move a pending withdrawal to another status; None when it is missing or already settled"""
        row = self._write(f"""
            UPDATE withdrawals
            SET status = %s
            WHERE id = %s AND status = %s
            RETURNING {self.columns}
        """, (int(status), withdrawal_id, int(WithdrawalStatus.PENDING)))
        return self._map_row_to_withdrawal(row) if row else None

    def approve_and_debit(self, withdrawal_id: str) -> Optional[Withdrawal]:
        """
        Approve a pending withdrawal and take the amount out of the seller balance

        Both writes share one transaction. The balance never drops below zero.

        Returns:
            Approved withdrawal, or None when it does not exist or is not pending
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE withdrawals
                SET status = %s
                WHERE id = %s AND status = %s
                RETURNING {self.columns}
            """, (int(WithdrawalStatus.APPROVED), withdrawal_id, int(WithdrawalStatus.PENDING)))

            row = cursor.fetchone()
            if not row:
                conn.rollback()
                return None

            cursor.execute("""
                UPDATE sales
                SET balance = GREATEST(0, COALESCE(balance, 0) - %s)
                WHERE user_id = %s
            """, (row['withdraw_amount'], row['user_id']))

            conn.commit()
            return self._map_row_to_withdrawal(row)

        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Approving withdrawal {withdrawal_id} failed: {e}")
            raise BackendError("Database error on withdrawals") from e

        finally:
            cursor.close()
            conn.close()

    def delete(self, withdrawal_id: str) -> bool:
        return self._delete(withdrawal_id)
