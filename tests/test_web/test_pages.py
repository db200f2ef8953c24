"""
Tests for the server-rendered pages and the route guard middleware

Author: TM3
Date: 2026-03-02
"""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock, patch

from storefront.core.errors import NotFoundError, ValidationError
from storefront.main import app
from storefront.services.sale_service import SaleService


@pytest.fixture
def client():
    return TestClient(app, follow_redirects=False)


class TestRouteGuard:

    def test_dashboard_without_session_goes_to_login(self, client):
        response = client.get("/admin")

        assert response.status_code == 307
        assert response.headers["location"] == "/login?callbackUrl=%2Fadmin"

    def test_customer_is_sent_home(self, client, token_for):
        client.cookies.set("user-session", token_for("user-1", labels=["CUSTOMER"]))

        response = client.get("/admin/products")

        assert response.status_code == 307
        assert response.headers["location"] == "/"

    def test_admin_on_seller_pages_goes_to_admin(self, client, token_for):
        client.cookies.set("user-session", token_for("admin-1", labels=["ADMIN"]))

        response = client.get("/seller")

        assert response.headers["location"] == "/admin"

    def test_expired_session_goes_to_login(self, client, token_for):
        client.cookies.set("user-session", token_for("admin-1", labels=["ADMIN"], expires_in=-60))

        response = client.get("/admin")

        assert response.headers["location"] == "/login?callbackUrl=%2Fadmin"


class TestLoginPage:

    def test_form_renders(self, client):
        response = client.get("/login")

        assert response.status_code == 200
        assert "password" in response.text

    @patch("storefront.web.auth_pages.get_auth_service")
    def test_failed_login_redirects_with_error(self, mock_service, client):
        mock_service.return_value.sign_in.side_effect = NotFoundError("No account with that phone number")

        response = client.post("/login", data={"phone": "0999999999", "password": "wrong-pass"})

        assert response.status_code == 303
        assert response.headers["location"].startswith("/login?error=")
        assert "user-session" not in response.cookies

    @patch("storefront.web.auth_pages.get_auth_service")
    def test_admin_login_lands_on_dashboard(self, mock_service, client, token_for):
        # Arrange
        token = token_for("admin-1", labels=["ADMIN"])
        mock_service.return_value.sign_in.return_value = Mock(access_token=token, refresh_token="refresh")

        # Act
        response = client.post("/login", data={"phone": "0123456789", "password": "secret-pass"})

        # Assert
        assert response.status_code == 303
        assert response.headers["location"] == "/admin"
        assert response.cookies.get("user-session") == token

    @patch("storefront.web.auth_pages.get_auth_service")
    def test_login_follows_callback(self, mock_service, client, token_for):
        token = token_for("admin-1", labels=["ADMIN"])
        mock_service.return_value.sign_in.return_value = Mock(access_token=token, refresh_token="refresh")

        response = client.post(
            "/login", data={"phone": "0123456789", "password": "secret-pass", "callbackUrl": "/admin/orders"}
        )

        assert response.headers["location"] == "/admin/orders"


class TestCustomerPages:

    @patch("storefront.web.customer_pages.get_product_service")
    def test_home_lists_products(self, mock_service, client, sample_product):
        mock_service.return_value.get_products.return_value = ([sample_product], 1)

        response = client.get("/")

        assert response.status_code == 200
        assert sample_product.name in response.text
        mock_service.return_value.get_products.assert_called_once_with(keyword="")

    def test_task_page_needs_login(self, client):
        response = client.get("/task")

        assert response.status_code == 303
        assert response.headers["location"] == "/login?callbackUrl=%2Ftask"

    @patch("storefront.web.customer_pages.get_task_service")
    def test_completed_task_plays_effect(self, mock_service, client, token_for, sample_task):
        # Arrange
        client.cookies.set("user-session", token_for("user-1", labels=["CUSTOMER"]))
        mock_service.return_value.get_user_tasks.return_value = sample_task
        mock_service.return_value.complete_task.return_value = (sample_task, "fireworks")

        # Act
        response = client.post("/task/complete", data={"task_key": "1"})

        # Assert
        assert response.status_code == 303
        assert response.headers["location"].startswith("/task?effect=fireworks")

    @patch("storefront.web.customer_pages.get_task_service")
    def test_locked_task_shows_error(self, mock_service, client, token_for, sample_task):
        client.cookies.set("user-session", token_for("user-1", labels=["CUSTOMER"]))
        mock_service.return_value.get_user_tasks.return_value = sample_task
        mock_service.return_value.complete_task.side_effect = ValidationError("Task is locked")

        response = client.post("/task/complete", data={"task_key": "2"})

        assert response.headers["location"].startswith("/task?error=")

    @patch("storefront.web.customer_pages.get_withdrawal_service")
    def test_second_pending_withdrawal_is_refused(self, mock_service, client, token_for):
        client.cookies.set("user-session", token_for("user-1", labels=["CUSTOMER"]))
        mock_service.return_value.create_withdrawal.side_effect = ValidationError(
            "You already have a pending withdrawal request"
        )

        response = client.post("/my/withdraw", data={"amount": "10"})

        assert response.status_code == 303
        assert response.headers["location"].startswith("/my?error=")


class TestAdminSalesForm:

    FORM = {
        "balance": "120",
        "trial_bonus": "300",
        "today_bonus": "0",
        "total_earning": "20",
        "total_sales": "0",
        "task_complete": "4",
        "number_of_rating": "1",
    }

    @pytest.fixture
    def sales(self, client, token_for, sample_sale):
        client.cookies.set("user-session", token_for("admin-1", labels=["ADMIN"]))
        repository = Mock()
        repository.find_by_user.return_value = [sample_sale]
        repository.update.return_value = sample_sale
        with patch("storefront.web.admin_pages.get_sale_service", return_value=SaleService(sales=repository)):
            yield repository

    def test_saving_keeps_trial_date(self, client, sales):
        response = client.post("/admin/seller/user-1/sales", data=self.FORM)

        assert response.status_code == 303
        assert "message=" in response.headers["location"]
        sale_id, fields = sales.update.call_args[0]
        assert sale_id == "sale-1"
        assert fields["balance"] == 120
        assert "trial_bonus_date" not in fields

    def test_renew_trial_sets_todays_date(self, client, sales):
        client.post("/admin/seller/user-1/sales", data={**self.FORM, "renew_trial": "on"})

        fields = sales.update.call_args[0][1]
        assert fields["trial_bonus_date"] is not None
