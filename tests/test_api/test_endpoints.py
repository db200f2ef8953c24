"""
HTTP-level tests for the JSON API

Author: TM3
Date: 2026-03-02
"""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock, patch

from storefront.core.errors import ValidationError
from storefront.domain.withdrawal import WithdrawalStatus
from storefront.main import app
from storefront.services.withdrawal_service import WithdrawalService


@pytest.fixture
def client():
    return TestClient(app)


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


class TestEffectsEndpoints:

    def test_list_effects(self, client):
        response = client.get("/api/v1/effects")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 9
        assert "confetti" in body["data"]

    def test_render_frames(self, client, token_for):
        response = client.get(
            "/api/v1/effects/confetti", params={"frames": 3, "seed": 4}, headers=bearer(token_for())
        )

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 3
        assert len(body["frames"][0]) == 200

    def test_frames_require_login(self, client):
        response = client.get("/api/v1/effects/confetti", params={"frames": 3})
        assert response.status_code == 401

    @pytest.mark.parametrize("params", [{"frames": 600}, {"width": 4000}, {"height": 4000}])
    def test_oversized_render_is_rejected(self, client, token_for, params):
        response = client.get("/api/v1/effects/confetti", params=params, headers=bearer(token_for()))
        assert response.status_code == 422

    def test_unknown_effect_is_404(self, client, token_for):
        response = client.get("/api/v1/effects/smoke", headers=bearer(token_for()))

        assert response.status_code == 404
        assert "detail" in response.json()


class TestProductEndpoints:

    @patch("storefront.api.products.get_product_service")
    def test_list_products(self, mock_service, client, sample_product):
        # Arrange
        mock_service.return_value.get_products.return_value = ([sample_product], 1)

        # Act
        response = client.get("/api/v1/products", params={"keyword": "mug"})

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["data"][0]["id"] == "prod-1"
        mock_service.return_value.get_products.assert_called_once_with(limit=10000, offset=0, keyword="mug")


class TestAuthenticatedEndpoints:

    def test_task_board_requires_login(self, client):
        response = client.get("/api/v1/tasks/me")
        assert response.status_code == 401

    def test_expired_token_is_rejected(self, client, token_for):
        token = token_for("user-1", labels=["CUSTOMER"], expires_in=-60)

        response = client.get("/api/v1/tasks/me", headers=bearer(token))

        assert response.status_code == 401

    @patch("storefront.api.withdrawals.get_withdrawal_service")
    def test_customer_cannot_list_withdrawals(self, mock_service, client, token_for):
        token = token_for("user-1", labels=["CUSTOMER"])

        response = client.get("/api/v1/withdrawals", headers=bearer(token))

        assert response.status_code == 403
        mock_service.assert_not_called()

    @patch("storefront.api.withdrawals.get_withdrawal_service")
    def test_admin_sees_own_sellers_withdrawals(self, mock_service, client, token_for, pending_withdrawal):
        # Arrange
        mock_service.return_value.get_withdrawals_by_admin.return_value = ([pending_withdrawal], 1)
        token = token_for("admin-1", labels=["ADMIN"])

        # Act
        response = client.get("/api/v1/withdrawals", headers=bearer(token))

        # Assert
        assert response.status_code == 200
        assert response.json()["count"] == 1
        mock_service.return_value.get_withdrawals_by_admin.assert_called_once_with("admin-1", page=0, limit=25)
        mock_service.return_value.admin_get_all_withdrawals.assert_not_called()


class TestWalletGuards:

    @pytest.fixture
    def withdrawals(self, pending_withdrawal):
        repository = Mock()
        repository.find_by_user.return_value = [pending_withdrawal]
        repository.find_by_id.return_value = pending_withdrawal.model_copy(
            update={"status": WithdrawalStatus.APPROVED}
        )
        service = WithdrawalService(withdrawals=repository, sellers=Mock())
        with patch("storefront.api.withdrawals.get_withdrawal_service", return_value=service):
            yield repository

    def test_second_pending_request_is_refused(self, client, token_for, withdrawals):
        response = client.post(
            "/api/v1/withdrawals", json={"withdraw_amount": 10}, headers=bearer(token_for("user-1", labels=["CUSTOMER"]))
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "You already have a pending withdrawal request"}
        withdrawals.create.assert_not_called()

    def test_approved_withdrawal_cannot_be_reopened(self, client, token_for, withdrawals):
        response = client.put(
            "/api/v1/withdrawals/wd-1/status", json={"status": 1}, headers=bearer(token_for("admin-1", labels=["ADMIN"]))
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Withdrawal is already approved"}
        withdrawals.update.assert_not_called()

    @patch("storefront.api.tasks.get_task_service")
    def test_customers_cannot_create_boards(self, mock_service, client, token_for):
        response = client.post(
            "/api/v1/tasks", params={"user_id": "user-1"}, json={"progress": {"task1": True}},
            headers=bearer(token_for("user-1", labels=["CUSTOMER"]))
        )

        assert response.status_code == 403
        mock_service.assert_not_called()


class TestReferralCodeEndpoints:

    @patch("storefront.api.referral_codes.get_referral_code_service")
    def test_validate_is_public(self, mock_service, client):
        response = client.get("/api/v1/referral-codes/validate/123456")

        assert response.status_code == 200
        assert response.json()["data"] == {"code": "123456", "valid": True}

    @patch("storefront.api.referral_codes.get_referral_code_service")
    def test_invalid_code_returns_reason(self, mock_service, client):
        mock_service.return_value.validate_referral_code.side_effect = ValidationError("Invalid referral code")

        response = client.get("/api/v1/referral-codes/validate/000000")

        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid referral code"}


class TestAuthEndpoints:

    @patch("storefront.api.auth.get_auth_service")
    def test_login_sets_session_cookie(self, mock_service, client):
        # Arrange
        mock_service.return_value.sign_in.return_value = Mock(
            access_token="access-token", refresh_token="refresh-token", expires_in=3600
        )

        # Act
        response = client.post("/api/v1/auth/login", json={"phone": "0123456789", "password": "secret-pass"})

        # Assert
        assert response.status_code == 200
        assert response.json()["data"]["access_token"] == "access-token"
        assert response.cookies.get("user-session") == "access-token"
        mock_service.return_value.sign_in.assert_called_once_with("0123456789", "secret-pass")


class TestHealth:

    @patch("storefront.main.get_db_connection_with_retry")
    def test_degraded_without_database(self, mock_connect, client):
        mock_connect.side_effect = Exception("connection refused")

        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert body["database"]["error"] == "connection refused"
