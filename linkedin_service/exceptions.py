"""
Application exceptions

Every exception carries the HTTP status it maps to. Handlers in main.py
render them into the standard response envelope.
"""
from typing import Optional, List, Dict, Any


class AppException(Exception):
    """Base class for errors reported to API callers"""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(AppException, ValueError):
    """Malformed or out-of-range input

    Also a ValueError so domain validators can be reused inside pydantic schemas.
    """
    status_code = 400
    default_message = "Validation errors"


class AuthenticationError(AppException):
    """Missing, invalid or expired credential"""
    status_code = 401
    default_message = "Not authorized"


class AuthorizationError(AppException):
    """Authenticated, but not allowed to touch the resource"""
    status_code = 403
    default_message = "Not authorized to access this resource"


class NotFoundError(AppException):
    """Resource missing or soft-deleted"""
    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppException):
    """Duplicate unique value"""
    status_code = 400
    default_message = "Resource already exists"


class UnexpectedError(AppException):
    """Store unavailable or unhandled fault"""
    status_code = 500
    default_message = "Server error"
