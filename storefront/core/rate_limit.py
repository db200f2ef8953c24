"""
Request throttling
Sliding one-minute windows kept in process memory
"""
import hashlib
import threading
import time
from collections import defaultdict
from typing import Dict, List, Tuple

from fastapi import Request, HTTPException, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from storefront.core.config import settings


class RateLimiter:
    """
    Timestamps of recent requests per caller, trimmed to the window on each check.

    Counters are per process; behind several workers each one limits on its own.
    """

    def __init__(self, cleanup_interval: int = 60):
        # {identifier: [timestamp, ...]}
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._lock = threading.Lock()
        self._last_cleanup = time.time()
        self._cleanup_interval = cleanup_interval

    def _cleanup_old_entries(self, now: float, window_seconds: int):
        """Drop identifiers whose requests all fell out of twice the window"""
        if now - self._last_cleanup < self._cleanup_interval:
            return

        cutoff = now - window_seconds * 2
        for identifier in list(self._requests.keys()):
            self._requests[identifier] = [ts for ts in self._requests[identifier] if ts > cutoff]
            if not self._requests[identifier]:
                del self._requests[identifier]

        self._last_cleanup = now

    def is_allowed(
        self,
        identifier: str,
        max_requests: int,
        window_seconds: int = 60
    ) -> Tuple[bool, int, int]:
        """
        Check if a request is allowed under the rate limit.

        Returns:
            Tuple of (is_allowed, remaining_requests, retry_after_seconds)
        """
        now = time.time()
        window_start = now - window_seconds

        with self._lock:
            self._cleanup_old_entries(now, window_seconds)

            in_window = [ts for ts in self._requests[identifier] if ts > window_start]
            self._requests[identifier] = in_window

            if len(in_window) >= max_requests:
                retry_after = int(min(in_window) + window_seconds - now) + 1
                return False, 0, retry_after

            in_window.append(now)
            return True, max_requests - len(in_window), 0

    def reset(self):
        with self._lock:
            self._requests.clear()


# Shared by the middleware and the form dependency
rate_limiter = RateLimiter()


# Requests per minute
RATE_LIMITS = {
    "authenticated": 600,
    "unauthenticated": 120,
    "auth_form": 10,
}

# Never throttled
EXEMPT_PATHS = {
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
}


def get_client_ip(request: Request) -> str:
    """Get the client IP, considering proxies"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


def _session_identifier(request: Request) -> str:
    """Identify a caller by session token when present, else by IP"""
    token = request.cookies.get(settings.SESSION_COOKIE)
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[7:]
    if token:
        digest = hashlib.sha256(token.encode()).hexdigest()[:24]
        return f"session:{digest}"
    return f"ip:{get_client_ip(request)}"


def _too_many(limit: int, retry_after: int) -> JSONResponse:
    # Returned, not raised, so the CORS middleware still decorates it
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": "Too many requests, please wait a moment."},
        headers={
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": str(limit),
            "X-RateLimit-Remaining": "0",
        }
    )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-minute budget for every page and API call

    Signed-in callers are counted per session token, everybody else per IP.
    Allowed responses carry X-RateLimit-Limit / X-RateLimit-Remaining.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if request.method == "OPTIONS" or path in EXEMPT_PATHS or path.startswith("/static"):
            return await call_next(request)

        identifier = _session_identifier(request)
        kind = "authenticated" if identifier.startswith("session:") else "unauthenticated"
        limit = RATE_LIMITS[kind]

        allowed, remaining, retry_after = rate_limiter.is_allowed(identifier, limit)
        if not allowed:
            return _too_many(limit, retry_after)

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response


async def auth_rate_limit(request: Request):
    """Dependency for the login/signup handlers: a few submissions per IP per minute"""
    identifier = f"form:{request.url.path}:{get_client_ip(request)}"
    allowed, _, retry_after = rate_limiter.is_allowed(identifier, RATE_LIMITS["auth_form"])
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many attempts. Try again in {retry_after} seconds.",
            headers={"Retry-After": str(retry_after)}
        )
