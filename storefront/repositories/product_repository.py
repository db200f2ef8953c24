"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models.

Author: TM3
Date: 2026-03-02
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple

from storefront.domain.product import Product, ProductCreate
from storefront.repositories.base import BaseRepository


class ProductRepository(BaseRepository):
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    table = "products"
    columns = "id, name, description, image_urls, quantity, price, discount_rate, created_at"
    writable_columns = frozenset({"name", "description", "image_urls", "quantity", "price", "discount_rate"})

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        return Product(
            id=str(row['id']),
            name=row['name'],
            description=row.get('description') or "",
            image_urls=list(row.get('image_urls') or []),
            quantity=row.get('quantity') or 0,
            price=row.get('price') or 0,
            discount_rate=row.get('discount_rate') or 0,
            created_at=row.get('created_at')
        )

    def find_by_id(self, product_id: str) -> Optional[Product]:
        """
        Find product by ID

        Returns:
            Product or None if not found
        """
        row = self._find_by_id(product_id)
        return self._map_row_to_product(row) if row else None

    def find_by_ids(self, product_ids: Sequence[str]) -> List[Product]:
        if not product_ids:
            return []
        rows = self._fetch_all(f"""
            SELECT {self.columns}
            FROM products
            WHERE id::text = ANY(%s)
        """, self._in_clause(product_ids))
        return [self._map_row_to_product(row) for row in rows]

    def find_all(
        self,
        keyword: Optional[str] = None,
        limit: int = 10000,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products, newest first

        Args:
            keyword: Case-insensitive match inside the product name
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of products, total count)
        """
        conditions = []
        params: List[Any] = []

        if keyword:
            conditions.append("name ILIKE %s")
            params.append(f"%{keyword}%")

        where_clause = " AND ".join(conditions) if conditions else "1=1"

        rows, total = self._fetch_page(where_clause, params, "created_at DESC", limit, offset)
        return [self._map_row_to_product(row) for row in rows], total

    def create(self, data: ProductCreate) -> Product:
        row = self._insert(data.model_dump())
        return self._map_row_to_product(row)

    def update(self, product_id: str, fields: Dict[str, Any]) -> Optional[Product]:
        row = self._update(product_id, fields)
        return self._map_row_to_product(row) if row else None

    def decrement_quantity(self, product_id: str, units: int) -> Optional[Product]:
        """
        Take units out of stock in one statement

        Returns:
            Updated product, or None when the product is missing or short on stock
        """
        row = self._write(f"""
            UPDATE products
            SET quantity = quantity - %s
            WHERE id = %s AND quantity >= %s
            RETURNING {self.columns}
        """, (units, product_id, units))
        return self._map_row_to_product(row) if row else None

    def delete(self, product_id: str) -> bool:
        return self._delete(product_id)
