"""
Unit tests for signup/login, sellers and admins

Author: TM3
Date: 2026-03-02
"""
import pytest
from unittest.mock import Mock

from storefront.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from storefront.domain.referral_code import ReferralCode
from storefront.domain.user import AccountUpdate, AdminCreate, SignUpRequest, User
from storefront.services.admin_service import AdminService
from storefront.services.auth_service import AuthService, format_phone
from storefront.services.seller_service import SellerService


def signup(**overrides):
    data = {
        "name": "Aina",
        "phone": "0123456789",
        "password": "secret-pass",
        "confirm_password": "secret-pass",
        "referral_code": "123456",
    }
    data.update(overrides)
    return SignUpRequest(**data)


class TestFormatPhone:

    @pytest.mark.parametrize("raw, expected", [
        ("0123456789", "+60123456789"),
        ("012 345 6789", "+60123456789"),
        ("+60123456789", "+60123456789"),
    ])
    def test_prefix_added_once(self, raw, expected):
        assert format_phone(raw) == expected


class TestAuthService:

    @pytest.fixture
    def service(self):
        return AuthService(users=Mock(), referral_codes=Mock(), sales=Mock())

    def test_sign_up_creates_customer_with_wallet(self, service):
        # Arrange
        service.users.find_by_phone.return_value = None
        service.users.create.return_value = User(id="user-1", name="Aina")

        # Act
        user = service.sign_up(signup())

        # Assert
        assert user.id == "user-1"
        kwargs = service.users.create.call_args.kwargs
        assert kwargs["labels"] == ["CUSTOMER"]
        assert kwargs["phone"] == "+60123456789"
        assert kwargs["prefs"] == {"referral_code": "123456"}
        assert kwargs["email"].endswith("@web.com")

        wallet = service.sales.create_sale.call_args[0][0]
        assert wallet.user_id == "user-1"
        assert wallet.trial_bonus == 300

    def test_passwords_must_match(self, service):
        with pytest.raises(ValidationError):
            service.sign_up(signup(confirm_password="different-pass"))
        service.users.create.assert_not_called()

    def test_invalid_referral_code_stops_signup(self, service):
        service.referral_codes.validate_referral_code.side_effect = ValidationError("Invalid referral code")

        with pytest.raises(ValidationError):
            service.sign_up(signup())
        service.users.create.assert_not_called()

    def test_duplicate_phone(self, service):
        service.users.find_by_phone.return_value = User(id="other")

        with pytest.raises(ConflictError):
            service.sign_up(signup())

    def test_sign_in_resolves_phone_to_email(self, service):
        # Arrange
        service.users.find_by_phone.return_value = User(id="user-1", email="abc@web.com")
        session = Mock(access_token="access", refresh_token="refresh")
        service.users.sign_in.return_value = session

        # Act
        result = service.sign_in("0123456789", "secret-pass")

        # Assert
        assert result is session
        service.users.find_by_phone.assert_called_once_with("+60123456789")
        service.users.sign_in.assert_called_once_with("abc@web.com", "secret-pass")

    def test_sign_in_unknown_phone(self, service):
        service.users.find_by_phone.return_value = None

        with pytest.raises(NotFoundError):
            service.sign_in("0999999999", "secret-pass")
        service.users.sign_in.assert_not_called()

    def test_logout_without_token_is_noop(self, service):
        service.logout(None)
        service.users.sign_out.assert_not_called()

    def test_prefs_are_merged(self, service):
        user = User(id="user-1", prefs={"referral_code": "123456"})
        service.users.find_by_id.return_value = user
        service.users.update_metadata.return_value = user.model_copy(
            update={"prefs": {"referral_code": "123456", "theme": "dark"}}
        )

        prefs = service.update_user_prefs("user-1", {"theme": "dark"})

        service.users.update_metadata.assert_called_once_with(user, prefs={"referral_code": "123456", "theme": "dark"})
        assert prefs["theme"] == "dark"


class TestSellerService:

    def test_sellers_by_admin_follow_referral_codes(self):
        # Arrange
        users = Mock()
        users.find_by_label.return_value = [
            User(id="s1", name="Aina", prefs={"referral_code": "111111"}),
            User(id="s2", name="Budi", prefs={"referral_code": "222222"}),
            User(id="s3", name="Citra", prefs={"referral_code": "111111"}),
        ]
        codes = Mock()
        codes.find_by_owner.return_value = [ReferralCode(id="r1", code="111111", belongs_to="admin-1")]
        service = SellerService(users=users, referral_codes=codes)

        # Act
        sellers, total = service.get_sellers_by_admin("admin-1")

        # Assert
        assert total == 2
        assert [s.id for s in sellers] == ["s1", "s3"]
        users.find_by_label.assert_called_with("CUSTOMER")

    def test_admin_without_codes_has_no_sellers(self):
        codes = Mock()
        codes.find_by_owner.return_value = []
        service = SellerService(users=Mock(), referral_codes=codes)

        assert service.get_sellers_by_admin("admin-1") == ([], 0)

    def test_keyword_and_paging(self):
        users = Mock()
        users.find_by_label.return_value = [User(id=f"s{i}", name=f"Seller {i}") for i in range(5)]
        service = SellerService(users=users, referral_codes=Mock())

        page, total = service.get_all_sellers(page=1, page_size=2, keyword="seller")

        assert total == 5
        assert [s.id for s in page] == ["s2", "s3"]

    def test_update_changes_phone_and_password(self):
        # Arrange
        users = Mock()
        seller = User(id="s1", name="Aina", labels=["CUSTOMER"])
        users.find_by_id.return_value = seller
        service = SellerService(users=users, referral_codes=Mock())

        # Act
        service.update_seller("s1", AccountUpdate(name="Aina R", phone="0123456789", password="new-secret"))

        # Assert
        users.update.assert_called_once_with("s1", {"phone": "+60123456789", "password": "new-secret"})
        users.update_metadata.assert_called_once_with(seller, name="Aina R")

    def test_non_seller_is_not_found(self):
        users = Mock()
        users.find_by_id.return_value = User(id="a1", labels=["ADMIN"])
        service = SellerService(users=users, referral_codes=Mock())

        with pytest.raises(NotFoundError):
            service.get_seller_by_id("a1")


class TestAdminService:

    def test_only_superadmin_creates_admins(self, admin):
        service = AdminService(users=Mock(), referral_codes=Mock())

        with pytest.raises(ForbiddenError):
            service.create_admin(admin, AdminCreate(name="New", phone="0123456789", password="secret-pass"))

    def test_new_admin_gets_referral_code(self, superadmin):
        # Arrange
        users = Mock()
        users.find_by_phone.return_value = None
        users.create.return_value = User(id="admin-9", name="New", labels=["ADMIN"])
        referral_codes = Mock()
        referral_codes.admin_create_referral_code.return_value = ReferralCode(id="r9", code="999999", belongs_to="admin-9")
        service = AdminService(users=users, referral_codes=referral_codes)

        # Act
        created = service.create_admin(superadmin, AdminCreate(name="New", phone="0123456789", password="secret-pass"))

        # Assert
        assert created.id == "admin-9"
        assert users.create.call_args.kwargs["labels"] == ["ADMIN"]
        referral_codes.admin_create_referral_code.assert_called_once_with("admin-9")
