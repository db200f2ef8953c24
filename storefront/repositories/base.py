"""
Base Repository - shared cursor handling for table repositories

Every table repository opens a RealDictCursor connection per call,
commits writes, rolls back on failure and always closes.

Author: TM3
Date: 2026-03-02
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import psycopg2
from psycopg2.extras import Json

from storefront.core.database import get_db_connection_dict
from storefront.core.errors import BackendError

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Table access helpers

    Subclasses set:
        table: table name
        columns: SELECT list
        writable_columns: columns accepted by insert/update
        json_columns: columns stored as jsonb
    """

    table: str = ""
    columns: str = "*"
    writable_columns: frozenset = frozenset()
    json_columns: frozenset = frozenset()

    def _adapt(self, column: str, value: Any) -> Any:
        if column in self.json_columns and value is not None:
            return Json(value)
        return value

    def _fetch_one(self, query: str, params: Sequence = ()) -> Optional[dict]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(query, params)
            row = cursor.fetchone()
            return dict(row) if row else None

        except psycopg2.Error as e:
            logger.error(f"Query on {self.table} failed: {e}")
            raise BackendError(f"Database error on {self.table}") from e

        finally:
            cursor.close()
            conn.close()

    def _fetch_all(self, query: str, params: Sequence = ()) -> List[dict]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]

        except psycopg2.Error as e:
            logger.error(f"Query on {self.table} failed: {e}")
            raise BackendError(f"Database error on {self.table}") from e

        finally:
            cursor.close()
            conn.close()

    def _fetch_page(self, where_clause: str, params: List, order_by: str, limit: int, offset: int):
        """Rows of one page plus the total count for the same filter"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM {self.table}
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {self.columns}
                FROM {self.table}
                WHERE {where_clause}
                ORDER BY {order_by}
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            return [dict(row) for row in cursor.fetchall()], total

        except psycopg2.Error as e:
            logger.error(f"Paged query on {self.table} failed: {e}")
            raise BackendError(f"Database error on {self.table}") from e

        finally:
            cursor.close()
            conn.close()

    def _write(self, query: str, params: Sequence = ()) -> Optional[dict]:
        """Run a write, commit, and return the RETURNING row if any"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(query, params)
            row = cursor.fetchone() if cursor.description else None
            conn.commit()
            return dict(row) if row else None

        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Write on {self.table} failed: {e}")
            raise BackendError(f"Database error on {self.table}") from e

        finally:
            cursor.close()
            conn.close()

    def _filter_writable(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in values.items() if k in self.writable_columns}

    def _insert(self, values: Dict[str, Any], extra_sql: Optional[Dict[str, str]] = None) -> dict:
        """
        Insert a row and return it

        Args:
            values: column -> value, filtered to writable columns
            extra_sql: column -> SQL expression (e.g. {"ordered_at": "NOW()"})
        """
        values = self._filter_writable(values)
        extra_sql = extra_sql or {}

        names = list(values.keys()) + list(extra_sql.keys())
        placeholders = ["%s"] * len(values) + list(extra_sql.values())
        params = [self._adapt(k, v) for k, v in values.items()]

        return self._write(f"""
            INSERT INTO {self.table} ({", ".join(names)})
            VALUES ({", ".join(placeholders)})
            RETURNING {self.columns}
        """, params)

    def _update(
        self,
        record_id: str,
        values: Dict[str, Any],
        extra_sql: Optional[Dict[str, str]] = None
    ) -> Optional[dict]:
        """Update writable columns of one row; None when the row is missing"""
        values = self._filter_writable(values)
        extra_sql = extra_sql or {}

        assignments = [f"{k} = %s" for k in values.keys()]
        assignments += [f"{k} = {expr}" for k, expr in extra_sql.items()]
        if not assignments:
            return self._fetch_one(f"SELECT {self.columns} FROM {self.table} WHERE id = %s", (record_id,))

        params = [self._adapt(k, v) for k, v in values.items()] + [record_id]

        return self._write(f"""
            UPDATE {self.table}
            SET {", ".join(assignments)}
            WHERE id = %s
            RETURNING {self.columns}
        """, params)

    def _delete(self, record_id: str) -> bool:
        row = self._write(f"DELETE FROM {self.table} WHERE id = %s RETURNING id", (record_id,))
        return row is not None

    def _find_by_id(self, record_id: str) -> Optional[dict]:
        return self._fetch_one(f"""
            SELECT {self.columns}
            FROM {self.table}
            WHERE id = %s
        """, (record_id,))

    @staticmethod
    def _in_clause(values: Iterable) -> List:
        """Parameter for `= ANY(%s)` filters"""
        return [list(values)]
