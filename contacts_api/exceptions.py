"""
Contacts API: Custom Exception Hierarchy
========================================

What:  Application-specific exceptions, each tagged with a closed `ErrorKind`.
How:   Each exception carries a message and an optional context dict.
       A single global handler (registered in main.py) maps the kind to an
       HTTP status code and returns a structured JSON error body.
Who:   Raised by the store gateway and the contact service.
When:  During request processing, and by `ContactStore.connect()` at startup.

Exception Hierarchy:
    ContactsAPIError (base)
    ├── ValidationError
    │   ├── MissingFieldsError       → missing_fields
    │   ├── InvalidLengthError       → invalid_length
    │   ├── InvalidEmailError        → invalid_email
    │   ├── InvalidDateError         → invalid_date
    │   └── InvalidIdentifierError   → invalid_identifier
    ├── NotFoundError                → not_found
    ├── StoreUnavailableError        → store_unavailable
    │   └── StoreConnectionError     → store_unavailable (startup only)
    └── StoreOperationError          → store_operation_failed

    The exceptions know nothing about HTTP. Status codes live in
    `contacts_api.main.STATUS_BY_KIND`.
"""

import enum
from typing import Any, Dict, Iterable, Optional


class ErrorKind(str, enum.Enum):
    """Closed set of failure categories; the value is the `error` field in responses."""

    MISSING_FIELDS = "missing_fields"
    INVALID_LENGTH = "invalid_length"
    INVALID_EMAIL = "invalid_email"
    INVALID_DATE = "invalid_date"
    INVALID_IDENTIFIER = "invalid_identifier"
    MALFORMED_BODY = "malformed_body"
    NOT_FOUND = "not_found"
    STORE_UNAVAILABLE = "store_unavailable"
    STORE_OPERATION_FAILED = "store_operation_failed"


class ContactsAPIError(Exception):
    """
    Base exception for all Contacts API errors.

    Attributes:
        kind:     The ErrorKind this exception belongs to
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; returned only for client errors)
    """

    kind: ErrorKind = ErrorKind.STORE_OPERATION_FAILED

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ══════════════════════════════════════════════════════════════════════════
# Client input errors
# ══════════════════════════════════════════════════════════════════════════


class ValidationError(ContactsAPIError):
    """
    Raised when client input fails validation.

    Never raised after a store call has been issued: every subclass is
    detected locally from the request data alone.
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


class MissingFieldsError(ValidationError):
    """One or more of the five contact fields is absent or blank."""

    kind = ErrorKind.MISSING_FIELDS

    def __init__(self, missing: Iterable[str], required: Iterable[str]):
        self.missing = list(missing)
        message = (
            f"Missing required fields: {', '.join(self.missing)}. "
            f"All fields are required: {', '.join(required)}"
        )
        super().__init__(message=message, context={"missing_fields": self.missing})


class InvalidLengthError(ValidationError):
    """A name field is shorter or longer than allowed."""

    kind = ErrorKind.INVALID_LENGTH

    def __init__(self, field: str, min_length: int, max_length: int, actual: int):
        message = f"{field} must be between {min_length} and {max_length} characters"
        super().__init__(
            message=message,
            field=field,
            context={"min_length": min_length, "max_length": max_length, "length": actual},
        )


class InvalidEmailError(ValidationError):
    kind = ErrorKind.INVALID_EMAIL

    def __init__(self, value: str):
        super().__init__(
            message=f"Invalid email format: '{value}'. Expected something like name@example.com",
            field="email",
        )


class InvalidDateError(ValidationError):
    kind = ErrorKind.INVALID_DATE

    def __init__(self, value: str):
        super().__init__(
            message=f"Invalid birthday '{value}'. Expected a valid date in YYYY-MM-DD format",
            field="birthday",
        )


class InvalidIdentifierError(ValidationError):
    """The path identifier is not a syntactically valid contact id."""

    kind = ErrorKind.INVALID_IDENTIFIER

    def __init__(self, value: str):
        super().__init__(
            message=f"Invalid contact ID format: '{value}'",
            field="id",
        )


# ══════════════════════════════════════════════════════════════════════════
# Lookup errors
# ══════════════════════════════════════════════════════════════════════════


class NotFoundError(ContactsAPIError):
    """
    Raised when a requested resource does not exist.

    The store returns None (or an empty RETURNING result) for missing rows;
    the service converts that into this exception.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


# ══════════════════════════════════════════════════════════════════════════
# Store errors
# ══════════════════════════════════════════════════════════════════════════


class StoreUnavailableError(ContactsAPIError):
    """
    Raised when the contact store has no active connection.

    What:    `ContactStore.get_collection()` was called before `connect()`
             completed, or after `dispose()`.
    """

    kind = ErrorKind.STORE_UNAVAILABLE

    def __init__(
        self,
        message: str = "The contact store is not available. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreConnectionError(StoreUnavailableError):
    """
    Raised by `ContactStore.connect()` when the initial connection fails.

    The application lifespan lets this propagate so the server refuses to start.
    """

    def __init__(
        self,
        message: str = "Could not connect to the contact store",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreOperationError(ContactsAPIError):
    """
    Raised when a single store call fails (lost connection, constraint, bad schema).

    Not retried. `context["reason"]` holds the underlying driver message.
    """

    kind = ErrorKind.STORE_OPERATION_FAILED

    def __init__(
        self,
        operation: str,
        reason: str,
        message: str = "A database error occurred. Please try again later.",
    ):
        super().__init__(message=message, context={"operation": operation, "reason": reason})
        self.operation = operation
        self.reason = reason
