"""
DocStore API — Health Check Route
==================================

What:  Health check endpoint for monitoring and load balancer checks.
How:   Reports whether the Firestore client was initialized at startup and
       whether a one-document read against the users collection succeeds.
Who:   Called by container health checks, load balancers, and monitoring.

Status levels:
    - healthy:   Firestore reachable (HTTP 200)
    - unhealthy: client missing or read failed (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from app import __version__
from app.config import settings
from app.schemas.document import HealthResponse
from app.services.firestore_service import FirestoreService, get_firestore_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Firestore unavailable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    service: FirestoreService = Depends(get_firestore_service),
) -> HealthResponse:
    """
    Check Firestore with `collection(users).limit(1).get()`.

    A one-document read is the cheapest call that exercises credentials,
    project and network together.
    """
    firestore_status = "connected"

    if not service.is_initialized:
        firestore_status = "not_initialized"
    else:
        try:
            await service.client.collection(settings.users_collection).limit(1).get()
        except Exception as e:
            firestore_status = "disconnected"
            logger.warning("Health check: Firestore unreachable: %s", str(e))

    overall = "healthy" if firestore_status == "connected" else "unhealthy"
    if overall != "healthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        firestore=firestore_status,
        credential_source=service.credential_strategy,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
