"""
Common I/O models for API responses.

These models document the fixed-shape responses of the server: the health
probes and the error bodies produced by the exception handlers.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    """Schema for the health check response."""

    status: str = Field(description="Operational status, 'ok' when the server is reachable")


class VersionInfo(BaseModel):
    """Schema for the version response."""

    version: str = Field(description="Semantic version of the API")
    schema_version: str = Field(description="Version of the report schema")


class ErrorResponse(BaseModel):
    """Schema for unhandled errors returned by the global exception handler."""

    detail: str = Field(description="Human-readable error summary")
    error_id: int = Field(description="Identifier to find the error in the server log")
    error_type: str = Field(description="Exception class name")


class NotFoundResponse(BaseModel):
    """Schema for a missing entity."""

    detail: str = Field(description="Which entity was not found")
    entity: str = Field(description="Entity class name")
    entity_id: Any = Field(description="Primary key that was looked up")
