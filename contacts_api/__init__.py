"""
Contacts API: Application Package Initializer
=============================================

What: Marks the `contacts_api` directory as a Python package.
Who:  Used by uvicorn, Alembic and pytest (`from contacts_api.config import settings`).

Architecture Note:
    The service follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, normalization
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │     Database (Contact Store)        │  ← Async SQLAlchemy gateway
    └─────────────────────────────────────┘

    - Routes translate HTTP requests into service calls
    - Services hold the validation rules and can be tested without HTTP
    - Models describe the table; Schemas describe the JSON contract
    - The store gateway owns the connection pool and its lifecycle
"""

__version__ = "1.0.0"
