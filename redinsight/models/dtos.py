"""
Pydantic Data Transfer Objects (DTOs) for the RedInsight HTTP API.
"""

from pydantic import BaseModel


class ErrorBody(BaseModel):
    """Structured error body returned by the proxy and the app-level handlers."""
    error: str
    message: str = ""


class HealthStatus(BaseModel):
    """Liveness response; independent of upstream reachability."""
    status: str = "OK"
    message: str
