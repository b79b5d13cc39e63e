"""
Twitter Clone Backend - Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       JSON error responses with the matching HTTP status code.
Who:   Raised by the auth gate and services; caught by global handlers.

Exception Hierarchy:
    TwitterCloneError (base)
    ├── ValidationError          → 400 Bad Request
    ├── ConflictError            → 400 Bad Request (username taken)
    ├── InvalidCredentialsError  → 400 Bad Request (login rejected)
    ├── AuthenticationError      → 401 Unauthorized (missing/invalid token)
    ├── AuthorizationError       → 401 Unauthorized (not visible / not owned)
    └── DatabaseError            → 500 Internal Server Error

The messages below are part of the public contract: v1 clients
match on them, so they are kept verbatim.
"""

from typing import Any, Dict, Optional

INVALID_TOKEN_MESSAGE = "Invalid JWT Token"
INVALID_REQUEST_MESSAGE = "Invalid Request"


class TwitterCloneError(Exception):
    """
    Base exception for all application errors.

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


class ValidationError(TwitterCloneError):
    """
    Raised when client input fails a business rule.

    When:    Password shorter than the minimum length, or longer than the
             hashing library accepts.
    HTTP:    400 Bad Request

    Schema-level problems (missing fields, wrong JSON types) never reach this
    class; FastAPI answers those with 422.
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


class ConflictError(TwitterCloneError):
    """Raised when registering a username that already exists. HTTP 400."""

    def __init__(
        self,
        message: str = "User already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(TwitterCloneError):
    """
    Raised when a login attempt fails.

    The message is either "Invalid user" (unknown username) or
    "Invalid password" (hash mismatch). HTTP 400.
    """

    def __init__(
        self,
        message: str = "Invalid user",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationError(TwitterCloneError):
    """
    Raised by the auth gate when no valid bearer token is presented.

    Missing header, malformed token, bad signature and expired token all
    produce this same error and message. HTTP 401.
    """

    def __init__(
        self,
        message: str = INVALID_TOKEN_MESSAGE,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(TwitterCloneError):
    """
    Raised when the caller may not see or modify a resource.

    Also used when a lookup simply finds nothing (tweet missing, no likes,
    no replies), so a caller cannot tell "absent" from "forbidden". HTTP 401.
    """

    def __init__(
        self,
        message: str = INVALID_REQUEST_MESSAGE,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(TwitterCloneError):
    """
    Raised when a database operation fails unexpectedly.

    The client always gets a generic message; the underlying driver error is
    logged server-side only. HTTP 500.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
