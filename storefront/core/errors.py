"""
Application errors

Services raise these; API routers translate them into HTTPException and
HTML routes turn them into a redirect carrying the message.
"""
from fastapi import HTTPException


class StorefrontError(Exception):
    """Base error with an HTTP status attached"""
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_http(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.message)


class ValidationError(StorefrontError):
    status_code = 400


class NotAuthorizedError(StorefrontError):
    status_code = 401


class ForbiddenError(StorefrontError):
    status_code = 403


class NotFoundError(StorefrontError):
    status_code = 404


class ConflictError(StorefrontError):
    status_code = 409


class BackendError(StorefrontError):
    """Supabase or database call failed"""
    status_code = 502
