"""
Contacts API: Contact Service (Business Logic)
==============================================

What:  The five contact operations: list, get, create, update, delete.
How:   Validates input locally, normalizes it, issues exactly one call on the
       ContactCollection handle and maps the result to a response model.
Who:   Called by the route handlers in contacts_api.routes.contacts.

Validation order for create/update (first violation wins):
    1. Identifier syntax (update only)       → InvalidIdentifierError
    2. All five fields present and non-blank → MissingFieldsError
    3. Name lengths within [2, 50]           → InvalidLengthError
    4. Email shape local@domain.tld          → InvalidEmailError
    5. Birthday is a real YYYY-MM-DD date    → InvalidDateError

    Nothing touches the store until all checks pass.

Design:
    ContactService holds no state. The collection handle is passed to each
    call, so tests can hand in an AsyncMock instead of a database.
"""

import logging
import re
import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, List

from contacts_api.database import ContactCollection
from contacts_api.exceptions import (
    InvalidDateError,
    InvalidEmailError,
    InvalidIdentifierError,
    InvalidLengthError,
    MissingFieldsError,
    NotFoundError,
)
from contacts_api.schemas.contact import (
    ContactCreateResponse,
    ContactDeleteResponse,
    ContactInput,
    ContactResponse,
    ContactUpdateResponse,
    UpdatedFields,
)

logger = logging.getLogger(__name__)

# JSON name → model attribute, in the order they are reported
REQUIRED_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "favoriteColor": "favorite_color",
    "birthday": "birthday",
}

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
BIRTHDAY_FORMAT = "%Y-%m-%d"


class ContactService:
    """
    Business logic layer for contact operations.

    Error Handling Strategy:
        Validation errors are raised before any store call. NotFoundError is
        raised when the store reports no matching record. Store errors
        (StoreOperationError) propagate unchanged from the collection.
    """

    # ── Validation helpers ────────────────────────────────────────────────

    def _parse_identifier(self, raw_id: str) -> uuid.UUID:
        try:
            return uuid.UUID(str(raw_id))
        except ValueError:
            raise InvalidIdentifierError(raw_id)

    def _validate_required(self, payload: ContactInput) -> Dict[str, str]:
        """Returns the stripped values; raises if any field is absent or blank."""
        values: Dict[str, str] = {}
        missing: List[str] = []
        for json_name, attr in REQUIRED_FIELDS.items():
            value = getattr(payload, attr)
            if value is None or not value.strip():
                missing.append(json_name)
            else:
                values[attr] = value.strip()
        if missing:
            raise MissingFieldsError(missing=missing, required=REQUIRED_FIELDS.keys())
        return values

    def _validate_lengths(self, values: Dict[str, str]) -> None:
        for json_name, attr in (("firstName", "first_name"), ("lastName", "last_name")):
            length = len(values[attr])
            if not NAME_MIN_LENGTH <= length <= NAME_MAX_LENGTH:
                raise InvalidLengthError(
                    field=json_name,
                    min_length=NAME_MIN_LENGTH,
                    max_length=NAME_MAX_LENGTH,
                    actual=length,
                )

    def _validate_email(self, email: str) -> str:
        if not EMAIL_PATTERN.match(email):
            raise InvalidEmailError(email)
        return email.lower()

    def _parse_birthday(self, value: str) -> date:
        try:
            return datetime.strptime(value, BIRTHDAY_FORMAT).date()
        except ValueError:
            raise InvalidDateError(value)

    def validate_input(self, payload: ContactInput) -> Dict[str, Any]:
        """
        Run the content checks in order and return normalized column values.

        Returns:
            Dict with first_name, last_name, email (lowercased),
            favorite_color (all trimmed) and birthday as a date.
        """
        values = self._validate_required(payload)
        self._validate_lengths(values)
        return {
            "first_name": values["first_name"],
            "last_name": values["last_name"],
            "email": self._validate_email(values["email"]),
            "favorite_color": values["favorite_color"],
            "birthday": self._parse_birthday(values["birthday"]),
        }

    # ── Operations ────────────────────────────────────────────────────────

    async def list_contacts(self, collection: ContactCollection) -> List[ContactResponse]:
        """All contacts in insertion order; no pagination or filtering."""
        contacts = await collection.find_all()
        return [ContactResponse.model_validate(contact) for contact in contacts]

    async def get_contact(self, collection: ContactCollection, raw_id: str) -> ContactResponse:
        """
        Retrieve a single contact.

        Raises:
            InvalidIdentifierError: raw_id is not a UUID (no store call made)
            NotFoundError: no contact has this id
        """
        contact_id = self._parse_identifier(raw_id)
        contact = await collection.find_by_id(contact_id)
        if contact is None:
            raise NotFoundError(resource="contact", resource_id=str(contact_id))
        return ContactResponse.model_validate(contact)

    async def create_contact(
        self, collection: ContactCollection, payload: ContactInput
    ) -> ContactCreateResponse:
        """
        Validate, normalize, timestamp and insert a new contact.

        The identifier is assigned by the store; callers cannot supply one.
        """
        values = self.validate_input(payload)
        now = datetime.now(timezone.utc)
        values["created_at"] = now
        values["updated_at"] = now

        contact = await collection.insert_one(values)
        logger.info("Contact created: %s (%s)", contact.id, contact.display_name)

        return ContactCreateResponse(
            id=contact.id,
            message="Contact created successfully",
            contact=ContactResponse.model_validate(contact),
        )

    async def update_contact(
        self, collection: ContactCollection, raw_id: str, payload: ContactInput
    ) -> ContactUpdateResponse:
        """
        Replace the five editable fields of an existing contact.

        `id` and `created_at` are never written; `updated_at` is set to now.
        """
        contact_id = self._parse_identifier(raw_id)
        values = self.validate_input(payload)
        values["updated_at"] = datetime.now(timezone.utc)

        row = await collection.update_by_id(contact_id, values)
        if row is None:
            raise NotFoundError(resource="contact", resource_id=str(contact_id))
        logger.info("Contact updated: %s", contact_id)

        return ContactUpdateResponse(
            message="Contact updated successfully",
            updated_fields=UpdatedFields.model_validate(row),
        )

    async def delete_contact(
        self, collection: ContactCollection, raw_id: str
    ) -> ContactDeleteResponse:
        contact_id = self._parse_identifier(raw_id)
        row = await collection.delete_by_id(contact_id)
        if row is None:
            raise NotFoundError(resource="contact", resource_id=str(contact_id))

        label = f"{row.first_name} {row.last_name}"
        logger.info("Contact deleted: %s (%s)", contact_id, label)
        return ContactDeleteResponse(
            message="Contact deleted successfully",
            deleted_contact=label,
        )


# Singleton instance; ContactService is stateless
contact_service = ContactService()
