"""
Larder Backend — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for every failure a request can hit.
How:   Each exception carries a client-safe message and an optional context
       dict. A single handler registered in main.py looks the exception's
       kind up in ERROR_STATUS and writes `{"error": message}`.
Who:   Raised by services and the auth dependency; caught by main.py.

Exception Hierarchy:
    LarderError (base)
    ├── ValidationError          → 400 Bad Request (missing input)
    ├── ConflictError            → 400 Bad Request (duplicate unique field)
    ├── AuthError                → 401 Unauthorized (bad credentials or token)
    │   └── MissingTokenError    → 403 Forbidden (no token presented)
    ├── NotFoundError            → 404 Not Found
    └── InternalError            → 500 Internal Server Error
        └── FileStorageError     → 500 Internal Server Error

    The context dict is logged server-side and never returned to the
    client: upstream error bodies, SQL errors and file paths stay in logs.
"""

from typing import Any, Dict, Optional, Type


class LarderError(Exception):
    """
    Base exception for all Larder application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(LarderError):
    """
    Raised when client input is missing or unusable.

    When:    Empty registration fields, missing ingredient fields, no image
             attached to a scan, no recipe query.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(LarderError):
    """Raised when a unique field (user email) is already taken. HTTP 400."""

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthError(LarderError):
    """
    Raised when credentials or a token cannot be accepted.

    Login uses one message for "no such user" and "wrong password" so the
    response never reveals which of the two was wrong.
    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Invalid credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MissingTokenError(AuthError):
    """Raised when a protected route is called without a token. HTTP 403."""

    def __init__(
        self,
        message: str = "Token missing",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(LarderError):
    """
    Raised when a requested resource does not exist.

    Deletions are not verified against the affected row count, so no
    current route raises this; it keeps 404 in the status table for
    lookups that do need it.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class InternalError(LarderError):
    """
    Raised when persistence or an external service fails.

    The message is the operation's generic failure text ("Failed to add
    item", "Failed to process image"); the cause goes into context.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(InternalError):
    """Raised when an upload cannot be written to or read from disk."""

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


# ── Error kind → HTTP status ──────────────────────────────────────────────
# Looked up along the exception's MRO, so subclasses may override parents.
ERROR_STATUS: Dict[Type[LarderError], int] = {
    ValidationError: 400,
    ConflictError: 400,
    MissingTokenError: 403,
    AuthError: 401,
    NotFoundError: 404,
    InternalError: 500,
    LarderError: 500,
}


def status_for(exc: LarderError) -> int:
    """Return the HTTP status for an application error."""
    for kind in type(exc).__mro__:
        if kind in ERROR_STATUS:
            return ERROR_STATUS[kind]
    return 500
