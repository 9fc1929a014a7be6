"""
Contacts API: Contact SQLAlchemy Model
======================================

What:  ORM model representing the `contacts` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   Used by ContactCollection for reads and inserts.
When:  Instantiated on create; queried on list and get.

Table Design:
    - seq: integer primary key; autoincrement records insertion order,
      which is the order GET /contacts returns
    - id: public UUID, unique, generated on insert; never supplied by callers
    - first_name / last_name: trimmed, at most 50 chars
    - favorite_color: trimmed text, no length limit
    - email: trimmed and lowercased before insert, no length limit
    - birthday: calendar date
    - created_at / updated_at: UTC timestamps; updated_at >= created_at
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from contacts_api.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Contact(Base):
    """
    A single contact record.

    Lifecycle:
        1. Inserted by POST /contacts (created_at == updated_at)
        2. Five editable fields replaced by PUT /contacts/{id}; updated_at bumped
        3. Removed permanently by DELETE /contacts/{id}
    """

    __tablename__ = "contacts"

    seq: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Insertion order; internal only",
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        unique=True,
        nullable=False,
        default=uuid.uuid4,
        comment="Public contact identifier",
    )

    # Name limits are enforced by ContactService (2-50 chars after trimming)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)

    email: Mapped[str] = mapped_column(
        String(),
        nullable=False,
        comment="Stored trimmed and lowercased",
    )

    favorite_color: Mapped[str] = mapped_column(String(), nullable=False)

    birthday: Mapped[date] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        comment="When this contact was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        comment="When this contact was last written (UTC)",
    )

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        """Developer-friendly string representation for debugging."""
        return f"<Contact(id={self.id}, email='{self.email}')>"
