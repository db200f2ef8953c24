"""
Sale Service
Customer wallets: creation on signup, balance changes and statistics

Author: TM3
Date: 2026-03-02
"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from storefront.core.config import settings
from storefront.core.errors import NotFoundError
from storefront.core.timeutil import utcnow
from storefront.domain.sale import Sale, SaleCreate, SaleUpdate
from storefront.repositories.sale_repository import SaleRepository

logger = logging.getLogger(__name__)


def default_sale(user_id: str, now: Optional[datetime] = None) -> SaleCreate:
    """Wallet every new customer starts with: empty balance plus today's trial bonus"""
    now = now or utcnow()
    return SaleCreate(
        user_id=user_id,
        balance=0,
        number_of_rating=0,
        total_earning=0,
        trial_bonus=settings.TRIAL_BONUS,
        trial_bonus_date=now,
        today_bonus=0,
        today_bonus_date=now,
    )


class SaleService:

    def __init__(self, sales: Optional[SaleRepository] = None):
        self.sales = sales or SaleRepository()

    def create_sale(self, data: SaleCreate) -> Tuple[Sale, bool]:
        """
        Create the wallet of a user unless one exists

        Returns:
            (sale, created) - created is False when an existing record came back
        """
        existing = self.get_sales_by_user_id(data.user_id)
        if existing is not None:
            logger.info(f"Sales record already exists for user {data.user_id}")
            return existing, False

        sale = self.sales.create(data)
        logger.info(f"Created sales record {sale.id} for user {data.user_id}")
        return sale, True

    def get_sales(self, limit: int = 10000) -> List[Sale]:
        return self.sales.find_all(limit=limit)

    def get_sale_by_id(self, sale_id: str) -> Sale:
        sale = self.sales.find_by_id(sale_id)
        if sale is None:
            raise NotFoundError("Sales record not found")
        return sale

    def get_user_sales(self, user_id: str) -> List[Sale]:
        return self.sales.find_by_user(user_id)

    def get_sales_by_user_id(self, user_id: str) -> Optional[Sale]:
        records = self.sales.find_by_user(user_id)
        return records[0] if records else None

    def require_user_sale(self, user_id: str) -> Sale:
        sale = self.get_sales_by_user_id(user_id)
        if sale is None:
            raise NotFoundError("Sales record not found")
        return sale

    def update_sale(self, sale_id: str, data: SaleUpdate) -> Sale:
        sale = self.sales.update(sale_id, data.model_dump(exclude_unset=True))
        if sale is None:
            raise NotFoundError("Sales record not found")
        return sale

    def update_total_sales(self, sale_id: str, amount: float) -> Sale:
        sale = self.sales.increment(sale_id, {"total_sales": amount})
        if sale is None:
            raise NotFoundError("Sales record not found")
        return sale

    def add_cashback(self, sale_id: str, cashback: float, now: Optional[datetime] = None) -> Sale:
        """Credit cashback to balance, today's bonus and lifetime earnings"""
        sale = self.sales.increment(
            sale_id,
            {"balance": cashback, "today_bonus": cashback, "total_earning": cashback},
            {"today_bonus_date": now or utcnow()}
        )
        if sale is None:
            raise NotFoundError("Sales record not found")
        return sale

    def record_task_completion(self, user_id: str) -> Optional[Sale]:
        sale = self.get_sales_by_user_id(user_id)
        if sale is None:
            return None
        return self.sales.increment(sale.id, {"task_complete": 1})

    def delete_sale(self, sale_id: str) -> None:
        if not self.sales.delete(sale_id):
            raise NotFoundError("Sales record not found")

    def admin_delete_sale(self, sale_id: str) -> None:
        self.delete_sale(sale_id)


_sale_service: Optional[SaleService] = None


def get_sale_service() -> SaleService:
    global _sale_service
    if _sale_service is None:
        _sale_service = SaleService()
    return _sale_service
