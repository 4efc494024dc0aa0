"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    document_store: bool = Field(..., description="Whether the document store is reachable")
    session_store: bool = Field(..., description="Whether the session store is reachable")
