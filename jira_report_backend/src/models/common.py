from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Simple health check response."""
    status: str = Field(..., description="Service status")
    app: str = Field(..., description="Application name")
    environment: str = Field(..., description="Application environment")
    jira_configured: bool = Field(..., description="Whether a usable JIRA browse URL is configured")
