"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. Scenario reports stay plain JSON objects;
only the fixed-shape responses are modelled here.

Modules:
- common: health, version and error responses
"""

from .common import ErrorResponse, HealthStatus, NotFoundResponse, VersionInfo

__all__ = [
    "ErrorResponse",
    "HealthStatus",
    "NotFoundResponse",
    "VersionInfo",
]
