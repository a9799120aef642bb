"""Health check endpoint."""

import time

from fastapi import APIRouter, Request

from rulesd_server import __version__
from rulesd_server.models import HealthResponse

router = APIRouter(tags=["health"])

# Server start time for uptime calculation
_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Returns service status, version, uptime and the size of the rule index.
    The status is "degraded" until the rule engine is initialized.
    """
    engine = getattr(request.app.state, "engine", None)
    ready = engine is not None and engine.is_initialized

    return HealthResponse(
        status="ok" if ready else "degraded",
        version=__version__,
        uptime=time.time() - _start_time,
        rules_loaded=len(engine.index) if ready else 0,
    )
