"""
CampusCare Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for every error kind the API reports.
How:   Each exception carries a message and optional context dict. Global
       exception handlers (registered in main.py) map them to HTTP status
       codes and structured JSON error bodies.
Who:   Raised by domain objects, repositories, services and use cases.

Exception Hierarchy:
    CampusCareError (base)
    ├── ValidationError              → 400 Bad Request
    ├── AuthError                    → 401 Unauthorized
    │   ├── InvalidCredentialsError
    │   ├── InvalidTokenError
    │   └── ExpiredTokenError
    ├── AuthorizationError           → 403 Forbidden
    ├── NotFoundError                → 404 Not Found
    ├── DuplicateError               → 409 Conflict
    ├── RateLimitExceededError       → 429 Too Many Requests
    └── DatabaseError                → 500 Internal Server Error
"""

from typing import Any, Dict, Iterable, Optional


class CampusCareError(Exception):
    """
    Base exception for all CampusCare application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info; only handlers that opt in return it
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CampusCareError):
    """
    Raised when input fails a business rule.

    Example response:
        {
            "error": "validation_error",
            "message": "stressLevel must be between 0 and 5",
            "details": {"field": "stressLevel"}
        }
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


class AuthError(CampusCareError):
    """Authentication failed: the caller could not be identified. HTTP 401."""

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(AuthError):
    """Email/password pair did not match an active account."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid email or password", context=context)


class InvalidTokenError(AuthError):
    """Token is malformed, has a bad signature, or is of the wrong type."""

    def __init__(
        self,
        message: str = "Invalid authentication token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ExpiredTokenError(AuthError):
    """Token signature is valid but its `exp` claim is in the past."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Authentication token has expired", context=context)


class AuthorizationError(CampusCareError):
    """
    Raised when an authenticated caller lacks the required role.

    HTTP: 403 Forbidden
    """

    def __init__(
        self,
        required_roles: Optional[Iterable[str]] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        roles = sorted(required_roles or [])
        if roles:
            ctx["required_roles"] = roles
        if message is None:
            message = "You do not have permission to perform this action"
            if roles:
                message = f"This action requires one of the roles: {', '.join(roles)}"
        super().__init__(message=message, context=ctx)


class NotFoundError(CampusCareError):
    """
    Raised when a requested resource does not exist.

    Repositories return None from SQLAlchemy lookups; they convert that None
    into NotFoundError so the global handler can answer 404.
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


class DuplicateError(CampusCareError):
    """Raised when a unique constraint would be violated. HTTP 409."""

    def __init__(
        self,
        message: str = "Resource already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseError(CampusCareError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the context
    (constraint names, driver error type) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(CampusCareError):
    """Raised when a client exceeds the per-IP request rate limit."""

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
