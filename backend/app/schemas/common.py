"""
Markpad Backend — Shared API Schemas
======================================

What:  Response models shared by every route: error body, delete
       confirmation, health report, and the camelCase base config.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for wire models: snake_case in Python, camelCase in JSON.

    populate_by_name lets services construct responses with field names
    (is_favorite=...) while clients send and receive isFavorite.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """
    Error body returned for every non-2xx response.

    Example:
        {"error": "Note not found", "code": "not_found", "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Human-readable error message")
    code: str = Field(description="Machine-readable error code")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(BaseModel):
    """Confirmation body for deletes."""
    message: str = Field(description="Human-readable confirmation")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
