"""
Unit tests for the dashboard route guard

Author: TM3
Date: 2026-03-02
"""
import pytest

from storefront.core.auth import SessionUser
from storefront.core.route_guard import is_protected, login_redirect_url, resolve_redirect


def user_with(*labels):
    return SessionUser(id="u1", labels=list(labels))


class TestIsProtected:

    @pytest.mark.parametrize("path", ["/admin", "/admin/seller", "/seller/product", "/superadmin"])
    def test_dashboard_paths_are_protected(self, path):
        assert is_protected(path) is True

    @pytest.mark.parametrize("path", ["/", "/task", "/login", "/administrator", "/sellers-guide", "/api/v1/products"])
    def test_other_paths_are_public(self, path):
        assert is_protected(path) is False


class TestResolveRedirect:

    def test_public_path_passes_without_session(self):
        assert resolve_redirect("/task", None) is None

    def test_missing_session_goes_to_login_with_callback(self):
        assert resolve_redirect("/admin/seller", None) == "/login?callbackUrl=%2Fadmin%2Fseller"

    def test_login_redirect_encodes_path(self):
        assert login_redirect_url("/seller") == "/login?callbackUrl=%2Fseller"

    def test_admin_on_seller_page_goes_to_admin_dashboard(self):
        assert resolve_redirect("/seller/product", user_with("ADMIN")) == "/admin"

    def test_seller_on_admin_page_goes_to_seller_dashboard(self):
        assert resolve_redirect("/admin", user_with("SELLER")) == "/seller"

    def test_customer_is_sent_home(self):
        assert resolve_redirect("/admin", user_with("CUSTOMER")) == "/"
        assert resolve_redirect("/seller", user_with("CUSTOMER")) == "/"

    def test_superadmin_pages_need_superadmin(self):
        assert resolve_redirect("/superadmin", user_with("ADMIN")) == "/"
        assert resolve_redirect("/superadmin/admin", user_with("SUPERADMIN")) is None

    def test_superadmin_may_open_admin_dashboard(self):
        assert resolve_redirect("/admin", user_with("SUPERADMIN")) is None
        assert resolve_redirect("/admin/withdrawal", user_with("SUPERADMIN")) is None

    def test_superadmin_without_seller_label_is_kept_off_seller_pages(self):
        assert resolve_redirect("/seller", user_with("SUPERADMIN")) == "/"
        assert resolve_redirect("/seller/sales", user_with("SUPERADMIN", "ADMIN")) == "/admin"

    def test_matching_label_passes(self):
        assert resolve_redirect("/admin/withdrawal", user_with("ADMIN")) is None
        assert resolve_redirect("/seller/sales", user_with("SELLER")) is None

    def test_user_with_both_labels_may_open_both(self):
        both = user_with("ADMIN", "SELLER")
        assert resolve_redirect("/admin", both) is None
        assert resolve_redirect("/seller", both) is None
