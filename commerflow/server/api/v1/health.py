"""
Health Check Endpoints.

This module provides system status endpoints (health, database, system,
version) used for monitoring and deployment verification.
"""

import os
import platform
import sys
import time
from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from commerflow.core.logging_config import get_logger
from commerflow.server.core import constant
from commerflow.server.core.config import settings
from commerflow.server.services.deps import ReposDep

logger = get_logger(__name__)

router = APIRouter()

_started_at = time.monotonic()


def _memory_mb():
    if sys.platform == "win32":
        return None
    import resource

    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # ru_maxrss is reported in bytes on macOS and kilobytes elsewhere
    divisor = 1024 * 1024 if sys.platform == "darwin" else 1024
    return round(peak / divisor, 2)


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": constant.SERVICE_NAME,
        "version": constant.API_VERSION,
    }


@router.get(
    "/health/db",
    summary="Database Health Check",
    description="Check database connectivity and report row counts of the main tables.",
    responses={503: {"description": "Database unreachable"}},
)
async def database_health(repos: ReposDep):
    """
    Database health check.

    Runs a count query against every main table; any failure is reported as 503.
    """
    try:
        counts = {
            "users": await repos.users.count(),
            "products": await repos.products.count(),
            "categories": await repos.categories.count(),
            "orders": await repos.orders.count(),
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "ERROR", "connected": False, "error": str(e)},
        )
    return {"status": "OK", "connected": True, "counts": counts}


@router.get(
    "/health/system",
    summary="System Information",
    description="Report runtime environment, interpreter, platform, memory and uptime.",
)
async def system_health():
    return {
        "status": "OK",
        "environment": settings.environment,
        "pythonVersion": platform.python_version(),
        "platform": platform.platform(),
        "pid": os.getpid(),
        "memoryMb": _memory_mb(),
        "uptimeSeconds": round(time.monotonic() - _started_at, 2),
    }


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    """
    Get API version.

    Returns the current semantic version of the API and supported schema version.
    """
    return {"version": constant.API_VERSION, "schema_version": constant.SCHEMA_VERSION}
