"""
Response schemas for the webhook and health endpoints.
"""

from pydantic import BaseModel, Field


class DeliveryReceipt(BaseModel):
    """Acknowledgement returned for an accepted event delivery."""
    status: str = Field(default="received")


class HealthStatus(BaseModel):
    """Health check payload."""
    status: str = Field(default="healthy")
    app: str
