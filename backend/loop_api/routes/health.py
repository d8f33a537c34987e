"""
Loop API — Health Check Route
===============================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Probes the hosted backend and reports the realtime connection state.

Status levels:
    - healthy:   backend reachable and realtime connected
    - degraded:  backend unreachable or realtime offline (HTTP 200 either
                 way; the public endpoints may still answer)
"""

import logging
import time

from fastapi import APIRouter, Depends

from loop_api import __version__
from loop_api.dependencies import get_realtime, get_store
from loop_api.schemas.responses import HealthResponse
from loop_api.services.realtime import RealtimeConnection
from loop_api.services.store_base import DataStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    store: DataStore = Depends(get_store),
    realtime: RealtimeConnection = Depends(get_realtime),
) -> HealthResponse:
    backend_ok = await store.health_check()
    if not backend_ok:
        logger.warning("Health check: backend unreachable")

    # closed when realtime_enabled is off
    if realtime.is_open:
        realtime_status = realtime.state.value
    else:
        realtime_status = "closed"

    overall = "healthy" if backend_ok and realtime_status == "connected" else "degraded"
    return HealthResponse(
        status=overall,
        version=__version__,
        backend="reachable" if backend_ok else "unreachable",
        realtime=realtime_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
