"""
Seller Service
Seller accounts (users labelled CUSTOMER) as managed by admins

Author: TM3
Date: 2026-03-02
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from storefront.core.errors import BackendError, ConflictError, NotFoundError, ValidationError
from storefront.domain.user import AccountUpdate, Label, SellerCreate, User
from storefront.repositories.referral_code_repository import ReferralCodeRepository
from storefront.repositories.user_repository import UserRepository
from storefront.services.auth_service import format_phone

logger = logging.getLogger(__name__)


def paginate(items: List[User], page: int, page_size: int) -> List[User]:
    start = max(page, 0) * page_size
    return items[start:start + page_size]


def matches_keyword(user: User, keyword: str) -> bool:
    return not keyword.strip() or keyword.strip().lower() in user.name.lower()


def apply_account_update(users: UserRepository, user: User, data: AccountUpdate) -> User:
    """Rename, and change phone and password when given"""
    attributes: Dict[str, Any] = {}
    if data.phone:
        attributes["phone"] = format_phone(data.phone)
    if data.password:
        attributes["password"] = data.password
    if attributes:
        users.update(user.id, attributes)
    return users.update_metadata(user, name=data.name)


class SellerService:

    def __init__(
        self,
        users: Optional[UserRepository] = None,
        referral_codes: Optional[ReferralCodeRepository] = None
    ):
        self.users = users or UserRepository()
        self.referral_codes = referral_codes or ReferralCodeRepository()

    def create_seller(self, data: SellerCreate) -> User:
        if data.password != data.confirm_password:
            raise ValidationError("Passwords do not match")
        try:
            seller = self.users.create(
                email=data.email,
                password=data.password,
                name=data.name,
                labels=[Label.CUSTOMER.value]
            )
        except BackendError as e:
            if "already" in e.message.lower():
                raise ConflictError("User already exists") from e
            raise
        logger.info(f"Created seller {seller.id}")
        return seller

    def _sellers(self) -> List[User]:
        return self.users.find_by_label(Label.CUSTOMER.value)

    def get_all_sellers(self, page: int = 0, page_size: int = 25, keyword: str = "") -> Tuple[List[User], int]:
        sellers = [s for s in self._sellers() if matches_keyword(s, keyword)]
        return paginate(sellers, page, page_size), len(sellers)

    def get_seller_by_id(self, seller_id: str) -> User:
        seller = self.users.find_by_id(seller_id)
        if seller is None or not seller.has_label(Label.CUSTOMER.value):
            raise NotFoundError("Seller not found")
        return seller

    def update_seller(self, seller_id: str, data: AccountUpdate) -> User:
        seller = self.get_seller_by_id(seller_id)
        return apply_account_update(self.users, seller, data)

    def delete_seller(self, seller_id: str) -> None:
        self.get_seller_by_id(seller_id)
        self.users.delete(seller_id)
        logger.info(f"Deleted seller {seller_id}")

    def get_sellers_by_referral_code(self, code: str) -> List[User]:
        return [s for s in self._sellers() if s.referral_code == code]

    def get_sellers_by_admin(
        self,
        admin_id: str,
        page: int = 0,
        page_size: int = 10000,
        keyword: str = ""
    ) -> Tuple[List[User], int]:
        """Sellers who signed up with one of the admin's referral codes"""
        codes = {code.code for code in self.referral_codes.find_by_owner(admin_id)}
        if not codes:
            return [], 0

        sellers = [
            s for s in self._sellers()
            if s.referral_code in codes and matches_keyword(s, keyword)
        ]
        return paginate(sellers, page, page_size), len(sellers)


_seller_service: Optional[SellerService] = None


def get_seller_service() -> SellerService:
    global _seller_service
    if _seller_service is None:
        _seller_service = SellerService()
    return _seller_service
