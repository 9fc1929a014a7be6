"""
Contacts API: Index Route
=========================

What:  GET / returns a welcome payload listing the available endpoints.
       `AVAILABLE_ROUTES` is also used by the 404 handler in main.py.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from contacts_api import __version__

router = APIRouter(tags=["Index"])

AVAILABLE_ROUTES = {
    "root": "GET /",
    "contacts": {
        "getAll": "GET /contacts",
        "getOne": "GET /contacts/{id}",
        "create": "POST /contacts",
        "update": "PUT /contacts/{id}",
        "delete": "DELETE /contacts/{id}",
    },
    "documentation": "GET /api-docs",
    "health": "GET /health",
}


@router.get("/", summary="API welcome and endpoint directory")
async def index() -> dict:
    return {
        "message": "Contacts API - Welcome!",
        "description": "A REST API for managing contacts",
        "version": __version__,
        "endpoints": AVAILABLE_ROUTES,
        "note": "Visit /api-docs for the interactive API documentation",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
