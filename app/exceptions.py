"""
DocStore API — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the few ways a passthrough can fail.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by the Firebase bootstrap and FirestoreService; caught by handlers.

Exception Hierarchy:
    DocStoreError (base)
    ├── ValidationError    → 400 Bad Request
    ├── NotFoundError      → 404 Not Found
    ├── CredentialsError   → 500 Internal Server Error
    └── DatabaseError      → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class DocStoreError(Exception):
    """
    Base exception for all DocStore application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only some handlers return it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DocStoreError):
    """
    Raised when Firestore rejects the shape of a request before sending it.

    When:  An unknown query operator, or a field path the SDK cannot parse.
    HTTP:  400 Bad Request
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


class NotFoundError(DocStoreError):
    """
    Raised when a requested document does not exist.

    When:  GET or PUT /users/{id} with an unknown ID.
    HTTP:  404 Not Found
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


class CredentialsError(DocStoreError):
    """
    Raised when a configured service-account credential cannot be loaded.

    When:  The key file is not valid JSON or not a service account,
           or FIREBASE_SERVICE_ACCOUNT_KEY does not parse.
    HTTP:  500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Firebase credentials could not be loaded",
        source: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if source:
            ctx["source"] = source
        super().__init__(message=message, context=ctx)
        self.source = source


class DatabaseError(DocStoreError):
    """
    Raised when a Firestore call fails or the client is unavailable.

    HTTP:  500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        SDK error details are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
