# switchboard/core/errors.py
"""
Domain errors for the messaging core.

Services raise these instead of leaking persistence or token exceptions;
the API layer turns them into HTTP responses with a fixed status code.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainError(Exception):
    """Base class for every error the messaging core surfaces to callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "code": self.code}

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.to_dict())


class ValidationError(DomainError):
    """Client input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class AuthenticationError(DomainError):
    """Caller is not authenticated, or not allowed to see the resource."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "User not authorized"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class DatabaseError(DomainError):
    """A persistence operation failed and was rolled back."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database Error"


class ConfigurationError(RuntimeError):
    """Required configuration is missing. Raised at startup, never per request."""
