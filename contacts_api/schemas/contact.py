"""
Contacts API: Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the JSON contract of the API.
How:   FastAPI uses these models to validate request bodies, serialize
       responses and generate the OpenAPI document.
Who:   Route handlers (as response models) and ContactService (as return types).

Naming:
    Python attributes are snake_case; JSON keys are camelCase through an alias
    generator (`first_name` ↔ `firstName`). FastAPI serializes responses by alias.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _as_utc(value: datetime) -> datetime:
    """Timestamps are stored in UTC; some drivers (SQLite) read them back naive."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CamelModel(BaseModel):
    """Base for response models: camelCase JSON, readable from ORM objects and rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ContactInput(BaseModel):
    """
    Body of POST /contacts and PUT /contacts/{id}.

    Every field is an optional string on purpose: presence, length, email
    shape and date format are checked in order by ContactService so each
    failure gets its own error kind. Pydantic only rejects structurally bad
    bodies (non-object, non-string values, unknown keys).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "firstName": "John",
                "lastName": "Doe",
                "email": "john.doe@example.com",
                "favoriteColor": "Blue",
                "birthday": "1990-05-15",
            }
        },
    )

    first_name: Optional[str] = Field(default=None, description="First name (2-50 characters)")
    last_name: Optional[str] = Field(default=None, description="Last name (2-50 characters)")
    email: Optional[str] = Field(default=None, description="Email address")
    favorite_color: Optional[str] = Field(default=None, description="Favorite color")
    birthday: Optional[str] = Field(default=None, description="Birthday in YYYY-MM-DD format")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ContactFields(CamelModel):
    """The five editable fields after normalization."""

    first_name: str
    last_name: str
    email: str
    favorite_color: str
    birthday: date


class ContactResponse(ContactFields):
    """Full representation of a stored contact."""

    id: uuid.UUID = Field(description="Store-assigned contact identifier")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: datetime = Field(description="Last update timestamp (UTC)")

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return _as_utc(v)


class UpdatedFields(ContactFields):
    updated_at: datetime

    @field_validator("updated_at")
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return _as_utc(v)


class ContactCreateResponse(CamelModel):
    """Returned by POST /contacts with HTTP 201."""

    id: uuid.UUID
    message: str = Field(default="Contact created successfully")
    contact: ContactResponse


class ContactUpdateResponse(CamelModel):
    """Returned by PUT /contacts/{id}."""

    message: str = Field(default="Contact updated successfully")
    updated_fields: UpdatedFields


class ContactDeleteResponse(CamelModel):
    """Returned by DELETE /contacts/{id}; `deletedContact` is "<first> <last>"."""

    message: str = Field(default="Contact deleted successfully")
    deleted_contact: str


# ══════════════════════════════════════════════════════════════════════════
# Error / Service Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "invalid_email",
            "message": "Invalid email format: 'nope'. Expected something like name@example.com",
            "details": {"field": "email"},
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error kind")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(CamelModel):
    """Returned by GET /health."""

    status: str = Field(description="Always 'OK' when the process is serving")
    message: str
    timestamp: datetime
    environment: str
    version: str
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since the service started")
