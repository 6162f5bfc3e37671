"""
Foodbabes Backend: Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       the JSON shape each endpoint promises.
Who:   Raised by services and the auth dependency; caught by global handlers.

Exception Hierarchy:
    FoodbabesError (base)
    ├── ValidationError      → 400 {message, errors}
    ├── StoreError           → 400 {message, errors}
    ├── AuthenticationError  → 401 {loggedOut: true, message}
    ├── TokenLookupError     → 403 {message, error}
    ├── NotFoundError        → 404 {message}
    └── ImageStorageError    → 500 {message}

Not-found on records is NOT an exception: comment and food lookups return
null, and a failed login returns {notFound: true}. Each endpoint keeps its
own convention.
"""

from typing import Any, Dict, Optional


class FoodbabesError(Exception):
    """
    Base exception for all Foodbabes application errors.

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


class ValidationError(FoodbabesError):
    """
    Raised when client input fails validation.

    HTTP: 400 Bad Request

    `errors` is a field-level map:
        {"message": {"message": "...", "kind": "string_too_short",
                     "path": "message", "value": "hey"}}

    Passing `field` without `errors` builds a single-entry map from the
    message, which is how the image storage reports a bad upload.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, Dict[str, Any]]] = None,
        field: Optional[str] = None,
        kind: str = "invalid",
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if errors is None and field:
            errors = {
                field: {"message": message, "kind": kind, "path": field, "value": value}
            }
        super().__init__(message=message, context=context)
        self.errors = errors or {}
        self.field = field


class StoreError(FoodbabesError):
    """
    Raised when a store operation fails and the endpoint reports it as 400.

    HTTP: 400 Bad Request

    The SQLAlchemy exception is kept in `context` for logging; clients only
    see `message` and a short `errors` map.
    """

    def __init__(
        self,
        message: str = "Database operation failed",
        errors: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = errors

    @classmethod
    def from_exception(cls, message: str, exc: Exception) -> "StoreError":
        """Wrap a driver/ORM exception; only its class name reaches the client."""
        kind = type(exc).__name__
        return cls(
            message=message,
            errors={"store": {"message": message, "kind": kind, "path": None, "value": None}},
            context={"error_type": kind, "error": str(exc)},
        )


class AuthenticationError(FoodbabesError):
    """
    Raised by the auth gate when no user owns the presented access token.

    HTTP: 401 Unauthorized, body {"loggedOut": true, "message": ...}
    """

    def __init__(
        self,
        message: str = "Please try logging in again!",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TokenLookupError(FoodbabesError):
    """
    Raised when the access token lookup itself fails (store unreachable,
    query error).

    HTTP: 403 Forbidden, body {"message": ..., "error": ...}
    """

    def __init__(
        self,
        message: str = "Access token is missing or wrong",
        error: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.error = error


class NotFoundError(FoodbabesError):
    """
    Raised when a stored image file does not exist.

    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ImageStorageError(FoodbabesError):
    """
    Raised when the image storage backend fails to store or remove an image.

    HTTP: 500 Internal Server Error

    Recovery:
        - Details (paths, SDK errors) go to the log via `context`
        - The client gets a generic message
    """

    def __init__(
        self,
        message: str = "Image upload failed. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
