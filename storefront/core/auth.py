"""
Authentication for the Storefront backend

Validates Supabase access tokens and provides the session user.
Tokens arrive either as a Bearer header (API clients) or in the
session cookie set at login (browser pages).
"""
from typing import List, Optional

from fastapi import Depends, HTTPException, status, Request, Response
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel, Field

from storefront.core.config import settings
from storefront.domain.user import Label


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)


class SessionUser(BaseModel):
    """User data extracted from the Supabase access token"""
    id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None
    labels: List[str] = Field(default_factory=list)

    def has_label(self, label: str) -> bool:
        return label in self.labels

    @property
    def is_superadmin(self) -> bool:
        return Label.SUPERADMIN.value in self.labels

    @property
    def is_admin(self) -> bool:
        return Label.ADMIN.value in self.labels

    @property
    def is_seller(self) -> bool:
        return Label.SELLER.value in self.labels


def decode_session_token(token: str) -> dict:
    """
    Decode and validate a Supabase access token.

    Supabase JWT structure (relevant claims):
    {
        "sub": "user uuid",
        "email": "<uuid>@web.com",
        "phone": "60123456789",
        "aud": "authenticated",
        "app_metadata": {"labels": ["CUSTOMER"]},
        "user_metadata": {"name": "Aina"},
        "exp": 1234567890
    }
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience=settings.SUPABASE_JWT_AUDIENCE
        )
    except JWTError as e:
        error_msg = str(e).lower()
        if "expired" in error_msg:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"}
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"}
        )


def user_from_token(token: str) -> SessionUser:
    """Build a SessionUser from a raw access token"""
    payload = decode_session_token(token)

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload: missing user id",
            headers={"WWW-Authenticate": "Bearer"}
        )

    app_metadata = payload.get("app_metadata") or {}
    user_metadata = payload.get("user_metadata") or {}

    return SessionUser(
        id=user_id,
        email=payload.get("email"),
        phone=payload.get("phone"),
        name=user_metadata.get("name"),
        labels=list(app_metadata.get("labels") or [])
    )


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> SessionUser:
    """
    Dependency that extracts and validates the current user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: SessionUser = Depends(get_current_user)):
            return {"message": f"Hello {user.name}"}
    """
    token = _extract_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return user_from_token(token)


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[SessionUser]:
    """
    Optional authentication - returns None if no valid token provided.
    """
    token = _extract_token(request, credentials)
    if not token:
        return None

    try:
        return user_from_token(token)
    except HTTPException:
        return None


def require_label(*labels: str):
    """
    Dependency factory for label-based access control.

    The user needs at least one of the given labels.

    Usage:
        @router.delete("/admins/{user_id}")
        async def delete_admin(
            user_id: str,
            user: SessionUser = Depends(require_label("SUPERADMIN"))
        ):
            pass
    """
    async def label_checker(
        user: SessionUser = Depends(get_current_user)
    ) -> SessionUser:
        if not any(user.has_label(label) for label in labels):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required label: {' or '.join(labels)}"
            )
        return user

    return label_checker


# Convenience dependencies for common label requirements
require_superadmin = require_label(Label.SUPERADMIN.value)
require_admin = require_label(Label.ADMIN.value, Label.SUPERADMIN.value)
require_seller = require_label(Label.SELLER.value, Label.ADMIN.value, Label.SUPERADMIN.value)


def set_session_cookies(response: Response, access_token: str, refresh_token: Optional[str]):
    """Store the login session in httpOnly cookies"""
    cookie_options = {
        "httponly": True,
        "secure": settings.COOKIE_SECURE,
        "samesite": "lax",
        "max_age": settings.SESSION_MAX_AGE,
        "path": "/",
    }
    response.set_cookie(settings.SESSION_COOKIE, access_token, **cookie_options)
    if refresh_token:
        response.set_cookie(settings.REFRESH_COOKIE, refresh_token, **cookie_options)


def clear_session_cookies(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE, path="/")
    response.delete_cookie(settings.REFRESH_COOKIE, path="/")


def session_token(request: Request) -> Optional[str]:
    return request.cookies.get(settings.SESSION_COOKIE)
