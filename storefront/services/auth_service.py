"""
Auth Service
Customer signup, phone + password login, logout and profile edits

Users sign in with a phone number. The auth backend needs an email, so
every account gets a synthetic `<uuid>@<SIGNUP_EMAIL_DOMAIN>` address and
login first resolves the phone to that address.

Author: TM3
Date: 2026-03-02
"""
import logging
import uuid
from typing import Any, Dict, Optional

from storefront.core.config import settings
from storefront.core.errors import BackendError, ConflictError, NotFoundError, ValidationError
from storefront.domain.user import Label, SignUpRequest, User
from storefront.repositories.user_repository import UserRepository
from storefront.services.referral_code_service import ReferralCodeService, get_referral_code_service
from storefront.services.sale_service import SaleService, default_sale, get_sale_service

logger = logging.getLogger(__name__)


def format_phone(phone: str) -> str:
    """Phone with the country prefix, added unless already present"""
    phone = phone.strip().replace(" ", "")
    if phone.startswith(settings.PHONE_PREFIX):
        return phone
    return settings.PHONE_PREFIX + phone.lstrip("+")


def synthetic_email() -> str:
    return f"{uuid.uuid4()}@{settings.SIGNUP_EMAIL_DOMAIN}"


class AuthService:

    def __init__(
        self,
        users: Optional[UserRepository] = None,
        referral_codes: Optional[ReferralCodeService] = None,
        sales: Optional[SaleService] = None
    ):
        self.users = users or UserRepository()
        self.referral_codes = referral_codes or get_referral_code_service()
        self.sales = sales or get_sale_service()

    def sign_up(self, data: SignUpRequest) -> User:
        """
        Register a customer

        The referral code must exist and be unredeemed. The new account gets
        the CUSTOMER label, the referral code in its prefs and a fresh wallet.
        """
        if data.password != data.confirm_password:
            raise ValidationError("Passwords do not match")

        self.referral_codes.validate_referral_code(data.referral_code)

        phone = format_phone(data.phone)
        if self.users.find_by_phone(phone) is not None:
            raise ConflictError("User already exists")

        try:
            user = self.users.create(
                email=synthetic_email(),
                password=data.password,
                name=data.name,
                labels=[Label.CUSTOMER.value],
                phone=phone,
                prefs={"referral_code": data.referral_code}
            )
        except BackendError as e:
            if "already" in e.message.lower():
                raise ConflictError("User already exists") from e
            raise

        self.sales.create_sale(default_sale(user.id))
        logger.info(f"Signed up customer {user.id} with referral code {data.referral_code}")
        return user

    def lookup_user_by_phone(self, phone: str) -> str:
        """Email of the account registered with this phone"""
        user = self.users.find_by_phone(format_phone(phone))
        if user is None or not user.email:
            raise NotFoundError("User not found")
        return user.email

    def sign_in(self, phone: str, password: str):
        """
        Returns:
            Backend session carrying access_token and refresh_token
        """
        email = self.lookup_user_by_phone(phone)
        session = self.users.sign_in(email, password)
        logger.info(f"User {email} signed in")
        return session

    def logout(self, access_token: Optional[str]) -> None:
        if not access_token:
            return
        self.users.sign_out(access_token)

    def get_user_by_id(self, user_id: str) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_user_info(self, user_id: str, name: str, phone: str) -> User:
        user = self.get_user_by_id(user_id)
        self.users.update(user_id, {"phone": format_phone(phone)})
        return self.users.update_metadata(user, name=name)

    def update_user_password(self, user_id: str, new_password: str) -> None:
        if len(new_password) < 8:
            raise ValidationError("Password must be at least 8 characters")
        self.users.update(user_id, {"password": new_password})
        logger.info(f"Password changed for user {user_id}")

    def get_user_prefs(self, user_id: str) -> Dict[str, Any]:
        return self.get_user_by_id(user_id).prefs

    def update_user_prefs(self, user_id: str, prefs: Dict[str, Any]) -> Dict[str, Any]:
        """Merge `prefs` into the stored preferences"""
        user = self.get_user_by_id(user_id)
        merged = {**user.prefs, **prefs}
        return self.users.update_metadata(user, prefs=merged).prefs


_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
