"""
Health check endpoint for monitoring and orchestration.

Reports uptime and whether the session signing key can be obtained; without
it every session token is rejected and all users are sent to sign-in.
"""

import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from propdesk.gateway.session import KeyProvider

router = APIRouter(tags=["health"])

# Global app start time (set in lifespan)
_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    """Called by lifespan to track when app started."""
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    """Calculate seconds since app start."""
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


async def check_signing_key(key_provider: KeyProvider) -> dict[str, Any]:
    """
    Check the session signing key source.

    Returns: {"status": "ok"|"down", "response_time_ms": N, "error": str (if down)}
    """
    start = time.time()
    try:
        key = await key_provider()
        response_time_ms = int((time.time() - start) * 1000)
        if not key:
            return {"status": "down", "response_time_ms": response_time_ms, "error": "EmptyKey"}
        return {
            "status": "ok",
            "response_time_ms": response_time_ms,
        }
    except Exception as e:
        response_time_ms = int((time.time() - start) * 1000)
        return {
            "status": "down",
            "response_time_ms": response_time_ms,
            "error": str(type(e).__name__),
        }


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description=(
        "Returns API health status including uptime and the signing key check. "
        "Returns 200 regardless of degraded dependencies (for graceful degradation)."
    ),
)
async def health_check(request: Request) -> JSONResponse:
    """
    Example response (degraded):
        {
            "status": "degraded",
            "uptime_seconds": 3600,
            "checks": {
                "signing_key": {"status": "down", "response_time_ms": 3, "error": "TimeoutError"}
            }
        }
    """
    key_check = await check_signing_key(request.app.state.gateway.reader.key_provider)
    overall_status = "ok" if key_check["status"] == "ok" else "degraded"

    return JSONResponse(
        content={
            "status": overall_status,
            "uptime_seconds": get_uptime_seconds(),
            "checks": {"signing_key": key_check},
        },
        status_code=status.HTTP_200_OK,
    )
