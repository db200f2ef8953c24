"""
Withdrawal Service
Cash-out requests from sellers and their review by admins

Author: TM3
Date: 2026-03-02
"""
import logging
from typing import List, Optional, Tuple

from storefront.core.auth import SessionUser
from storefront.core.errors import ForbiddenError, NotFoundError, ValidationError
from storefront.domain.withdrawal import Withdrawal, WithdrawalStatus, WithdrawalUpdate
from storefront.repositories.withdrawal_repository import WithdrawalRepository
from storefront.services.seller_service import SellerService, get_seller_service

logger = logging.getLogger(__name__)


class WithdrawalService:

    def __init__(
        self,
        withdrawals: Optional[WithdrawalRepository] = None,
        sellers: Optional[SellerService] = None
    ):
        self.withdrawals = withdrawals or WithdrawalRepository()
        self.sellers = sellers or get_seller_service()

    def create_withdrawal(self, user: SessionUser, amount: float) -> Withdrawal:
        if amount is None or amount <= 0:
            raise ValidationError("Withdrawal amount must be greater than zero")
        if self.has_pending_withdrawal(user.id):
            raise ValidationError("You already have a pending withdrawal request")
        withdrawal = self.withdrawals.create(user.id, amount)
        logger.info(f"User {user.id} requested withdrawal {withdrawal.id} of {amount}")
        return withdrawal

    def get_withdrawals(self, limit: int = 25, offset: int = 0) -> Tuple[List[Withdrawal], int]:
        return self.withdrawals.find_all(limit=limit, offset=offset)

    def get_withdrawal_by_id(self, withdrawal_id: str) -> Withdrawal:
        withdrawal = self.withdrawals.find_by_id(withdrawal_id)
        if withdrawal is None:
            raise NotFoundError("Withdrawal not found")
        return withdrawal

    def get_user_withdrawals(self, user_id: str) -> List[Withdrawal]:
        return self.withdrawals.find_by_user(user_id)

    def has_pending_withdrawal(self, user_id: str) -> bool:
        return any(w.is_pending for w in self.withdrawals.find_by_user(user_id))

    def _owned(self, user: SessionUser, withdrawal_id: str, action: str) -> Withdrawal:
        withdrawal = self.get_withdrawal_by_id(withdrawal_id)
        if withdrawal.user_id != user.id:
            raise ForbiddenError(f"Not authorized to {action} this withdrawal")
        return withdrawal

    def update_withdrawal(self, user: SessionUser, withdrawal_id: str, data: WithdrawalUpdate) -> Withdrawal:
        self._owned(user, withdrawal_id, "update")
        return self.withdrawals.update(withdrawal_id, data.model_dump(exclude_unset=True, exclude_none=True))

    def delete_withdrawal(self, user: SessionUser, withdrawal_id: str) -> None:
        self._owned(user, withdrawal_id, "delete")
        self.withdrawals.delete(withdrawal_id)

    def admin_get_all_withdrawals(
        self,
        page: int = 0,
        limit: int = 25,
        keyword: str = ""
    ) -> Tuple[List[Withdrawal], int]:
        return self.withdrawals.find_all(limit=limit, offset=max(page, 0) * limit, keyword=keyword or None)

    def get_withdrawals_by_admin(
        self,
        admin_id: str,
        page: int = 0,
        limit: int = 25
    ) -> Tuple[List[Withdrawal], int]:
        """Withdrawals of the sellers an admin referred"""
        sellers, _ = self.sellers.get_sellers_by_admin(admin_id)
        return self.withdrawals.find_all(
            limit=limit,
            offset=max(page, 0) * limit,
            user_ids=[seller.id for seller in sellers]
        )

    def _already_settled(self, withdrawal_id: str) -> ValidationError:
        current = self.get_withdrawal_by_id(withdrawal_id)
        return ValidationError(f"Withdrawal is already {current.status.name.lower()}")

    def admin_update_withdrawal_status(self, withdrawal_id: str, status: WithdrawalStatus) -> Withdrawal:
        """
        Settle a pending withdrawal

        Only pending requests change status; an approved or rejected one stays
        as it is, so a balance is never debited twice.
        """
        if status == WithdrawalStatus.APPROVED:
            return self.approve_withdrawal(withdrawal_id)
        if status == WithdrawalStatus.PENDING:
            current = self.get_withdrawal_by_id(withdrawal_id)
            if not current.is_pending:
                raise ValidationError(f"Withdrawal is already {current.status.name.lower()}")
            return current

        withdrawal = self.withdrawals.set_status_if_pending(withdrawal_id, status)
        if withdrawal is None:
            raise self._already_settled(withdrawal_id)
        logger.info(f"Withdrawal {withdrawal_id} -> {status.name}")
        return withdrawal

    def approve_withdrawal(self, withdrawal_id: str) -> Withdrawal:
        """Approve and debit the seller balance (never below zero)"""
        approved = self.withdrawals.approve_and_debit(withdrawal_id)
        if approved is None:
            raise self._already_settled(withdrawal_id)
        logger.info(f"Approved withdrawal {withdrawal_id} of {approved.withdraw_amount} for {approved.user_id}")
        return approved

    def reject_withdrawal(self, withdrawal_id: str) -> Withdrawal:
        return self.admin_update_withdrawal_status(withdrawal_id, WithdrawalStatus.REJECTED)

    def admin_delete_withdrawal(self, withdrawal_id: str) -> None:
        if not self.withdrawals.delete(withdrawal_id):
            raise NotFoundError("Withdrawal not found")


_withdrawal_service: Optional[WithdrawalService] = None


def get_withdrawal_service() -> WithdrawalService:
    global _withdrawal_service
    if _withdrawal_service is None:
        _withdrawal_service = WithdrawalService()
    return _withdrawal_service
