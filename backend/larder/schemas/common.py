"""Schemas shared by every resource."""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain confirmation, e.g. `{"message": "Item deleted"}`."""
    message: str = Field(description="Human-readable confirmation")


class ErrorResponse(BaseModel):
    """
    What:  Error body returned by every endpoint on failure.
    Example:
        {"error": "Email already registered"}

    Nothing else is included: no stack trace, no upstream body, no field
    hints beyond what the message already says.
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring probes."""
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
