"""
Contacts API: Declarative Base
==============================

What:  Base class for all SQLAlchemy ORM models.
Who:   Inherited by `Contact`; its metadata is used by the store gateway
       (schema creation) and by Alembic (autogenerate).
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Registers models with a single shared metadata object."""
    pass
