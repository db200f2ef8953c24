"""
Admin Service
Admin accounts, managed by superadmins only

Author: TM3
Date: 2026-03-02
"""
import logging
from typing import List, Optional, Tuple

from storefront.core.auth import SessionUser
from storefront.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from storefront.domain.user import AccountUpdate, AdminCreate, Label, User
from storefront.repositories.user_repository import UserRepository
from storefront.services.auth_service import format_phone, synthetic_email
from storefront.services.referral_code_service import ReferralCodeService, get_referral_code_service
from storefront.services.seller_service import apply_account_update

logger = logging.getLogger(__name__)


class AdminService:

    def __init__(
        self,
        users: Optional[UserRepository] = None,
        referral_codes: Optional[ReferralCodeService] = None
    ):
        self.users = users or UserRepository()
        self.referral_codes = referral_codes or get_referral_code_service()

    @staticmethod
    def _require_superadmin(actor: SessionUser, action: str):
        if not actor.is_superadmin:
            raise ForbiddenError(f"Only superadmins can {action} admin accounts")

    def get_admins(self, actor: SessionUser, limit: int = 10000, offset: int = 0) -> Tuple[List[User], int]:
        self._require_superadmin(actor, "view")
        admins = self.users.find_by_label(Label.ADMIN.value)
        return admins[offset:offset + limit], len(admins)

    def create_admin(self, actor: SessionUser, data: AdminCreate) -> User:
        """Create an admin together with a referral code it owns"""
        self._require_superadmin(actor, "create")

        phone = format_phone(data.phone)
        if self.users.find_by_phone(phone) is not None:
            raise ConflictError("Phone number is already in use")

        admin = self.users.create(
            email=synthetic_email(),
            password=data.password,
            name=data.name,
            labels=[Label.ADMIN.value],
            phone=phone
        )
        code = self.referral_codes.admin_create_referral_code(admin.id)
        logger.info(f"Created admin {admin.id} with referral code {code.code}")
        return admin

    def get_admin_by_id(self, admin_id: str) -> User:
        admin = self.users.find_by_id(admin_id)
        if admin is None or not admin.has_label(Label.ADMIN.value):
            raise NotFoundError("Admin not found")
        return admin

    def update_admin(self, actor: SessionUser, admin_id: str, data: AccountUpdate) -> User:
        self._require_superadmin(actor, "update")
        admin = self.get_admin_by_id(admin_id)
        return apply_account_update(self.users, admin, data)

    def delete_admin(self, actor: SessionUser, admin_id: str) -> None:
        self._require_superadmin(actor, "delete")
        if admin_id == actor.id:
            raise ValidationError("You cannot delete your own account")

        target = self.users.find_by_id(admin_id)
        if target is None or not target.has_label(Label.ADMIN.value):
            raise ValidationError("You can only delete admin accounts from this page")

        self.users.delete(admin_id)
        logger.info(f"Superadmin {actor.id} deleted admin {admin_id}")


_admin_service: Optional[AdminService] = None


def get_admin_service() -> AdminService:
    global _admin_service
    if _admin_service is None:
        _admin_service = AdminService()
    return _admin_service
