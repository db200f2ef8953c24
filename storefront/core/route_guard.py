"""
Route guard middleware

Dashboards live under /admin, /seller and /superadmin. Requests to those
paths need a verified session cookie and a matching label; anything else
is redirected before the page handler runs.
"""
import logging
from typing import Optional
from urllib.parse import quote

from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse

from storefront.core.auth import SessionUser, user_from_token
from storefront.core.config import settings

logger = logging.getLogger(__name__)

ADMIN_PREFIX = "/admin"
SELLER_PREFIX = "/seller"
SUPERADMIN_PREFIX = "/superadmin"

PROTECTED_PREFIXES = (ADMIN_PREFIX, SELLER_PREFIX, SUPERADMIN_PREFIX)


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def is_protected(path: str) -> bool:
    return any(_under(path, prefix) for prefix in PROTECTED_PREFIXES)


def login_redirect_url(path: str) -> str:
    return f"/login?callbackUrl={quote(path, safe='')}"


def resolve_redirect(path: str, user: Optional[SessionUser]) -> Optional[str]:
    """
    Decide where a request for `path` should go.

    Returns None when the request may proceed, otherwise the redirect target.
    """
    if not is_protected(path):
        return None

    if user is None:
        return login_redirect_url(path)

    if _under(path, SUPERADMIN_PREFIX):
        return None if user.is_superadmin else "/"

    if user.is_superadmin and _under(path, ADMIN_PREFIX):
        return None

    if user.is_admin and not user.is_seller and _under(path, SELLER_PREFIX):
        return ADMIN_PREFIX

    if user.is_seller and not user.is_admin and _under(path, ADMIN_PREFIX):
        return SELLER_PREFIX

    if not user.is_admin and not user.is_seller:
        return "/"

    return None


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """
    Redirects unauthenticated or wrongly-labelled users away from dashboards.

    - No session cookie or an unverifiable one: /login?callbackUrl=<path>
    - ADMIN on a seller page: /admin
    - SELLER on an admin page: /seller
    - SUPERADMIN: superadmin and admin pages; seller pages only with a matching label
    - Neither label: /
    - Unexpected failure: /login
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if not is_protected(path):
            return await call_next(request)

        try:
            token = request.cookies.get(settings.SESSION_COOKIE)
            user = None
            if token:
                try:
                    user = user_from_token(token)
                except HTTPException as e:
                    logger.info(f"Rejected session for {path}: {e.detail}")

            target = resolve_redirect(path, user)
        except Exception as e:
            logger.error(f"Route guard error for {path}: {e}")
            return RedirectResponse(url="/login", status_code=307)

        if target:
            return RedirectResponse(url=target, status_code=307)

        request.state.user = user
        return await call_next(request)
