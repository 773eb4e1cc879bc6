"""
Product API — Liveness & Readiness Routes
==========================================

What:  GET /        liveness probe (process is up, reports uptime)
       GET /health  readiness probe (database reachable)
Who:   Load balancers, Docker health checks, humans with curl.

Status levels for /health:
    - connected:    SELECT 1 succeeded → 200 success envelope
    - disconnected: SELECT 1 failed    → 503 failure envelope
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from product_api import __version__
from product_api.responses import fail, ok
from product_api.schemas.product import Envelope, HealthData, UptimeData

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Process start time for uptime reporting
_start_time = time.time()


def uptime() -> float:
    return round(time.time() - _start_time, 3)


@router.get(
    "/",
    responses={200: {"description": "Service is running", "model": Envelope}},
    summary="Liveness probe",
)
async def root() -> JSONResponse:
    return ok("API is running", UptimeData(uptime=uptime()))


@router.get(
    "/health",
    responses={
        200: {"description": "Database reachable", "model": Envelope},
        503: {"description": "Database unreachable", "model": Envelope},
    },
    summary="Readiness probe",
)
async def health_check(request: Request) -> JSONResponse:
    """
    Check that the database answers a SELECT 1.

    Never raises: an unreachable database is reported as a 503 envelope so
    the probe itself cannot fail with a 500.
    """
    connected = await request.app.state.database.ping()
    data = HealthData(
        database="connected" if connected else "disconnected",
        version=__version__,
        uptime=uptime(),
    )
    if not connected:
        logger.warning("Health check: database unreachable")
        return fail("Service unavailable", 503, data)
    return ok("Service is healthy", data)
