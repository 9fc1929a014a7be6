"""
Contacts API: Contact Route Handlers
====================================

What:  HTTP endpoints for the five contact operations.
How:   Resolves the collection handle (500 if the store is not connected),
       delegates to ContactService and returns its response model.
Who:   Any API client; documented in the OpenAPI UI at /api-docs.

Routes:
    GET    /contacts          → 200 [Contact]
    GET    /contacts/{id}     → 200 Contact
    POST   /contacts          → 201 {id, message, contact}
    PUT    /contacts/{id}     → 200 {message, updatedFields}
    DELETE /contacts/{id}     → 200 {message, deletedContact}

The `{contact_id}` path parameter is a plain string; its syntax is checked by
the service so a malformed id yields 400 `invalid_identifier`.
"""

import logging
from typing import List

from fastapi import APIRouter, Body, Depends

from contacts_api.database import ContactCollection, get_collection
from contacts_api.schemas.contact import (
    ContactCreateResponse,
    ContactDeleteResponse,
    ContactInput,
    ContactResponse,
    ContactUpdateResponse,
    ErrorResponse,
)
from contacts_api.services.contact_service import contact_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["Contacts"])

SERVER_ERROR = {500: {"description": "Store unavailable or store operation failed", "model": ErrorResponse}}
BAD_ID = {400: {"description": "Malformed contact ID", "model": ErrorResponse}}
BAD_INPUT = {400: {"description": "Invalid ID or contact fields", "model": ErrorResponse}}
NOT_FOUND = {404: {"description": "Contact not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[ContactResponse],
    responses={**SERVER_ERROR},
    summary="List all contacts",
    description="Returns every contact in insertion order. No pagination or filtering.",
)
async def list_contacts(
    collection: ContactCollection = Depends(get_collection),
) -> List[ContactResponse]:
    return await contact_service.list_contacts(collection)


@router.get(
    "/{contact_id}",
    response_model=ContactResponse,
    responses={**BAD_ID, **NOT_FOUND, **SERVER_ERROR},
    summary="Get a single contact by ID",
)
async def get_contact(
    contact_id: str,
    collection: ContactCollection = Depends(get_collection),
) -> ContactResponse:
    return await contact_service.get_contact(collection, contact_id)


@router.post(
    "",
    status_code=201,
    response_model=ContactCreateResponse,
    responses={400: {"description": "Validation failed", "model": ErrorResponse}, **SERVER_ERROR},
    summary="Create a contact",
    description=(
        "All five fields are required. Names must be 2-50 characters, the email "
        "must look like name@example.com and the birthday must be a YYYY-MM-DD date. "
        "Names and color are trimmed; the email is trimmed and lowercased."
    ),
)
async def create_contact(
    payload: ContactInput = Body(...),
    collection: ContactCollection = Depends(get_collection),
) -> ContactCreateResponse:
    return await contact_service.create_contact(collection, payload)


@router.put(
    "/{contact_id}",
    response_model=ContactUpdateResponse,
    responses={**BAD_INPUT, **NOT_FOUND, **SERVER_ERROR},
    summary="Replace a contact's fields",
    description=(
        "Replaces all five editable fields (same rules as create) and bumps updatedAt. "
        "The ID and createdAt never change."
    ),
)
async def update_contact(
    contact_id: str,
    payload: ContactInput = Body(...),
    collection: ContactCollection = Depends(get_collection),
) -> ContactUpdateResponse:
    return await contact_service.update_contact(collection, contact_id, payload)


@router.delete(
    "/{contact_id}",
    response_model=ContactDeleteResponse,
    responses={**BAD_ID, **NOT_FOUND, **SERVER_ERROR},
    summary="Delete a contact",
)
async def delete_contact(
    contact_id: str,
    collection: ContactCollection = Depends(get_collection),
) -> ContactDeleteResponse:
    return await contact_service.delete_contact(collection, contact_id)
