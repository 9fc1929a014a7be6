"""
Contacts API: Health Check Route
================================

What:  Liveness endpoint for monitoring and load balancer probes.
How:   Always answers 200 while the process is serving; the `database` field
       reports whether the contact store currently answers `SELECT 1`.
Who:   Docker health checks, load balancers, uptime monitors.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from contacts_api import __version__
from contacts_api.config import settings
from contacts_api.database import ContactStore, get_store
from contacts_api.schemas.contact import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description=(
        "Returns service status, environment, version and store connectivity. "
        "Always 200 while the process is up."
    ),
)
async def health_check(store: ContactStore = Depends(get_store)) -> HealthResponse:
    database = "connected" if await store.ping() else "disconnected"
    if database == "disconnected":
        logger.warning("Health check: contact store unreachable")

    return HealthResponse(
        status="OK",
        message="Contacts API is running",
        timestamp=datetime.now(timezone.utc),
        environment=settings.environment,
        version=__version__,
        database=database,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
