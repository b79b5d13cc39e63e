"""
Twitter Clone Backend - Shared Response Schemas
================================================

What:  Error and health response models used across all routers.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# Wire format of every `dateTime` field (what SQLite's datetime('now') yields)
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_datetime(value: datetime) -> str:
    return value.strftime(DATETIME_FORMAT)


class ErrorResponse(BaseModel):
    """
    What:  Error body returned by every global exception handler.

    Fields:
        error: Machine-readable error code (e.g. "authentication_error")
        message: The human-readable message ("Invalid JWT Token", ...)
        details: Optional extra context (e.g. which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "invalid_request",
            "message": "Invalid Request",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for container and load-balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
