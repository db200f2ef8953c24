"""
Unit tests for configuration, errors, rate limiting, token handling and time helpers

Author: TM3
Date: 2026-03-02
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException

from storefront.core.config import settings
from storefront.core.errors import ConflictError, NotFoundError, StorefrontError, ValidationError
from storefront.core.rate_limit import RateLimiter
from storefront.core.timeutil import as_utc, is_same_day
from storefront.core.auth import user_from_token


class TestSettings:

    def test_comma_separated_origins(self):
        configured = settings.model_copy(update={"ALLOWED_ORIGINS": "http://a.test, http://b.test"})
        assert configured.get_allowed_origins() == ["http://a.test", "http://b.test"]

    def test_json_origins(self):
        configured = settings.model_copy(update={"ALLOWED_ORIGINS": '["http://a.test"]'})
        assert configured.get_allowed_origins() == ["http://a.test"]

    def test_empty_origins_fall_back_to_localhost(self):
        configured = settings.model_copy(update={"ALLOWED_ORIGINS": ""})
        assert configured.get_allowed_origins() == ["http://localhost:3000"]


class TestErrors:

    def test_subclasses_carry_status_codes(self):
        assert ValidationError("bad").status_code == 400
        assert NotFoundError("missing").status_code == 404
        assert ConflictError("twice").status_code == 409

    def test_explicit_status_code_wins(self):
        error = StorefrontError("teapot", status_code=418)
        assert error.status_code == 418
        assert error.message == "teapot"

    def test_to_http(self):
        http_error = NotFoundError("Product not found").to_http()
        assert isinstance(http_error, HTTPException)
        assert http_error.status_code == 404
        assert http_error.detail == "Product not found"


class TestRateLimiter:

    def test_blocks_after_limit(self):
        limiter = RateLimiter()

        assert limiter.is_allowed("ip:1", max_requests=2) == (True, 1, 0)
        assert limiter.is_allowed("ip:1", max_requests=2) == (True, 0, 0)

        allowed, remaining, retry_after = limiter.is_allowed("ip:1", max_requests=2)
        assert allowed is False
        assert remaining == 0
        assert retry_after >= 1

    def test_identifiers_are_independent(self):
        limiter = RateLimiter()
        limiter.is_allowed("ip:1", max_requests=1)

        allowed, _, _ = limiter.is_allowed("ip:2", max_requests=1)
        assert allowed is True

    def test_reset_clears_windows(self):
        limiter = RateLimiter()
        limiter.is_allowed("ip:1", max_requests=1)
        limiter.reset()

        allowed, _, _ = limiter.is_allowed("ip:1", max_requests=1)
        assert allowed is True


class TestSessionTokens:

    def test_user_from_token_reads_claims(self, token_for):
        user = user_from_token(token_for("user-9", labels=["ADMIN"], name="Nadia"))

        assert user.id == "user-9"
        assert user.name == "Nadia"
        assert user.email == "user-9@web.com"
        assert user.is_admin is True
        assert user.is_superadmin is False

    def test_expired_token_is_rejected(self, token_for):
        with pytest.raises(HTTPException) as exc_info:
            user_from_token(token_for(expires_in=-60))
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    def test_wrong_audience_is_rejected(self, token_for):
        with pytest.raises(HTTPException) as exc_info:
            user_from_token(token_for(audience="someone-else"))
        assert exc_info.value.status_code == 401

    def test_garbage_token_is_rejected(self):
        with pytest.raises(HTTPException):
            user_from_token("not-a-jwt")


class TestTimeHelpers:

    def test_naive_datetimes_are_utc(self):
        naive = datetime(2026, 3, 2, 23, 30)
        assert as_utc(naive).tzinfo == timezone.utc

    def test_same_day_compares_utc_dates(self):
        now = datetime(2026, 3, 2, 1, 0, tzinfo=timezone.utc)
        # 23:00 on 1 March in UTC-3 is already 2 March in UTC
        evening = datetime(2026, 3, 1, 23, 0, tzinfo=timezone(timedelta(hours=-3)))

        assert is_same_day(evening, now) is True
        assert is_same_day(now - timedelta(hours=2), now) is False
        assert is_same_day(None, now) is False
