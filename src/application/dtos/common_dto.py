"""Common DTOs for API responses and error handling."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from src.application.services.feedback import Notification


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Health status", examples=["healthy"])


class RootResponse(BaseModel):
    """Root endpoint response model."""
    status: str = Field(..., description="API status", examples=["ok"])
    service: str = Field(..., description="Service name", examples=["jobboard-backend"])
    version: str = Field(..., description="API version", examples=["0.1.0"])


class NotificationView(BaseModel):
    """A toast the client should display."""
    kind: Literal["success", "error"] = Field(..., description="Notification style")
    message: str = Field(..., description="Text to display", examples=["Profile updated successfully"])

    @classmethod
    def from_notification(cls, notification: Notification) -> NotificationView:
        return cls(kind=notification.kind, message=notification.message)
