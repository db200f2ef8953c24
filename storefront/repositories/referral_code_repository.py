"""
Referral Code Repository

Author: TM3
Date: 2026-03-02
"""
from typing import Any, Dict, List, Optional, Tuple

from storefront.domain.referral_code import ReferralCode
from storefront.repositories.base import BaseRepository


class ReferralCodeRepository(BaseRepository):
    """Repository for ReferralCode data access"""

    table = "referral_codes"
    columns = "id, code, belongs_to, user_id, created_at"
    writable_columns = frozenset({"code", "belongs_to", "user_id"})

    @staticmethod
    def _map_row(row: dict) -> ReferralCode:
        return ReferralCode(
            id=str(row['id']),
            code=str(row['code']),
            belongs_to=str(row['belongs_to']) if row.get('belongs_to') else None,
            user_id=str(row['user_id']) if row.get('user_id') else None,
            created_at=row.get('created_at')
        )

    def create(self, code: str, belongs_to: Optional[str] = None, user_id: Optional[str] = None) -> ReferralCode:
        row = self._insert({"code": code, "belongs_to": belongs_to, "user_id": user_id})
        return self._map_row(row)

    def code_exists(self, code: str) -> bool:
        row = self._fetch_one("SELECT 1 as found FROM referral_codes WHERE code = %s", (code,))
        return row is not None

    def find_by_code(self, code: str) -> Optional[ReferralCode]:
        row = self._fetch_one(f"""
            SELECT {self.columns}
            FROM referral_codes
            WHERE code = %s
        """, (code,))
        return self._map_row(row) if row else None

    def find_by_id(self, code_id: str) -> Optional[ReferralCode]:
        row = self._find_by_id(code_id)
        return self._map_row(row) if row else None

    def find_all(self, limit: int = 25, offset: int = 0) -> Tuple[List[ReferralCode], int]:
        rows, total = self._fetch_page("1=1", [], "created_at DESC", limit, offset)
        return [self._map_row(row) for row in rows], total

    def find_by_owner(self, owner_id: str) -> List[ReferralCode]:
        """Codes handed out by one admin"""
        rows = self._fetch_all(f"""
            SELECT {self.columns}
            FROM referral_codes
            WHERE belongs_to = %s
            ORDER BY created_at DESC
        """, (owner_id,))
        return [self._map_row(row) for row in rows]

    def update(self, code_id: str, fields: Dict[str, Any]) -> Optional[ReferralCode]:
        row = self._update(code_id, fields)
        return self._map_row(row) if row else None

    def redeem(self, code: str, user_id: str) -> Optional[ReferralCode]:
        """Mark an unredeemed code as used by `user_id`"""
        row = self._write(f"""
            UPDATE referral_codes
            SET user_id = %s
            WHERE code = %s AND user_id IS NULL
            RETURNING {self.columns}
        """, (user_id, code))
        return self._map_row(row) if row else None

    def delete(self, code_id: str) -> bool:
        return self._delete(code_id)
