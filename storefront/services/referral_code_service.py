"""
Referral Code Service
Six digit signup codes handed out by admins

Author: TM3
Date: 2026-03-02
"""
import logging
import random
from typing import List, Optional, Tuple

from storefront.core.auth import SessionUser
from storefront.core.errors import BackendError, ForbiddenError, NotFoundError, ValidationError
from storefront.domain.referral_code import CODE_MAX, CODE_MIN, ReferralCode, ReferralCodeUpdate
from storefront.repositories.referral_code_repository import ReferralCodeRepository

logger = logging.getLogger(__name__)

MAX_GENERATION_ATTEMPTS = 50


class ReferralCodeService:

    def __init__(self, codes: Optional[ReferralCodeRepository] = None, rng: Optional[random.Random] = None):
        self.codes = codes or ReferralCodeRepository()
        self.rng = rng or random.Random()

    def generate_unique_code(self) -> str:
        for _ in range(MAX_GENERATION_ATTEMPTS):
            code = str(self.rng.randint(CODE_MIN, CODE_MAX))
            if not self.codes.code_exists(code):
                return code
        raise BackendError("Could not generate a unique referral code")

    def create_referral_code(self, user: SessionUser) -> ReferralCode:
        return self.admin_create_referral_code(user.id)

    def admin_create_referral_code(self, belongs_to: Optional[str]) -> ReferralCode:
        code = self.codes.create(self.generate_unique_code(), belongs_to=belongs_to)
        logger.info(f"Created referral code {code.code} for {belongs_to}")
        return code

    def get_referral_codes(self, limit: int = 25, offset: int = 0) -> Tuple[List[ReferralCode], int]:
        return self.codes.find_all(limit=limit, offset=offset)

    def get_referral_code_by_code(self, code: str) -> ReferralCode:
        found = self.codes.find_by_code(code)
        if found is None:
            raise NotFoundError("Invalid referral code")
        return found

    def get_referral_code_by_id(self, code_id: str) -> ReferralCode:
        found = self.codes.find_by_id(code_id)
        if found is None:
            raise NotFoundError("Referral code not found")
        return found

    def get_user_referral_codes(self, user_id: str) -> List[ReferralCode]:
        return self.codes.find_by_owner(user_id)

    def validate_referral_code(self, code: str) -> ReferralCode:
        """Existing, unredeemed code or a ValidationError saying why not"""
        found = self.codes.find_by_code(code)
        if found is None:
            raise ValidationError("Invalid referral code")
        if found.is_redeemed:
            raise ValidationError("Referral code already used")
        return found

    def redeem_referral_code(self, code: str, user_id: str) -> ReferralCode:
        redeemed = self.codes.redeem(code, user_id)
        if redeemed is None:
            self.validate_referral_code(code)
            raise ValidationError("Referral code already used")
        logger.info(f"Referral code {code} redeemed by {user_id}")
        return redeemed

    def _owned(self, user: SessionUser, code_id: str, action: str) -> ReferralCode:
        code = self.get_referral_code_by_id(code_id)
        if code.belongs_to != user.id:
            raise ForbiddenError(f"Not authorized to {action} this referral code")
        return code

    def update_referral_code(self, user: SessionUser, code_id: str, data: ReferralCodeUpdate) -> ReferralCode:
        self._owned(user, code_id, "update")
        return self.admin_update_referral_code(code_id, data)

    def delete_referral_code(self, user: SessionUser, code_id: str) -> None:
        self._owned(user, code_id, "delete")
        self.codes.delete(code_id)

    def admin_update_referral_code(self, code_id: str, data: ReferralCodeUpdate) -> ReferralCode:
        updated = self.codes.update(code_id, data.model_dump(exclude_unset=True))
        if updated is None:
            raise NotFoundError("Referral code not found")
        return updated

    def admin_delete_referral_code(self, code_id: str) -> None:
        if not self.codes.delete(code_id):
            raise NotFoundError("Referral code not found")


_referral_code_service: Optional[ReferralCodeService] = None


def get_referral_code_service() -> ReferralCodeService:
    global _referral_code_service
    if _referral_code_service is None:
        _referral_code_service = ReferralCodeService()
    return _referral_code_service
