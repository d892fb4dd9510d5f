"""
Larder Backend — Liveness & Health Routes
==========================================

What:  GET / answers as long as the process is up; GET /health also probes
       the database.
Who:   Clients checking the server is reachable, Docker health checks and
       load balancers.

Status levels:
    - healthy:   database answered SELECT 1 (HTTP 200)
    - unhealthy: database unreachable (HTTP 503, stop routing traffic)
"""

import logging

from fastapi import APIRouter, Request, Response

from larder import __version__
from larder.schemas.common import HealthResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/",
    response_model=MessageResponse,
    summary="Liveness message",
)
async def root() -> MessageResponse:
    return MessageResponse(message="Server is running")


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """Probe the database with a trivial query and report aggregate status."""
    connected = await request.app.state.repository.ping()
    if not connected:
        response.status_code = 503
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
    )
