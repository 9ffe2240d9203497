"""
Health Check Endpoints.

This module provides basic system status endpoints (health, version)
used for monitoring and deployment verification.
"""

from fastapi import APIRouter

from orm_pitfalls.core.models.io import HealthStatus, VersionInfo
from orm_pitfalls.server.core import constant

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthStatus,
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check() -> HealthStatus:
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return HealthStatus(status="ok")


@router.get(
    "/version",
    response_model=VersionInfo,
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version() -> VersionInfo:
    """
    Get API version.

    Returns the current semantic version of the API and the report schema version.
    """
    return VersionInfo(version=constant.API_VERSION, schema_version=constant.SCHEMA_VERSION)
