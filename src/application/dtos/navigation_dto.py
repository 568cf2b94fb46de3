from __future__ import annotations

from pydantic import BaseModel, Field

from src.application.dtos.common_dto import NotificationView


class NavLinkView(BaseModel):
    label: str = Field(..., description="Link text", examples=["Post a Job"])
    href: str = Field(..., description="Destination route", examples=["/post-job"])


class NavActionView(BaseModel):
    name: str = Field(..., description="Action identifier", examples=["sign_out"])
    label: str = Field(..., description="Button text", examples=["Sign Out"])


class NavigationView(BaseModel):
    """What the navigation bar shows for the current session."""
    brand: NavLinkView
    links: list[NavLinkView] = Field(..., description="Links in display order")
    actions: list[NavActionView] = Field(default_factory=list, description="Buttons that trigger actions")
    authenticated: bool = Field(..., description="Whether a session was present")


class SignOutResponse(BaseModel):
    ok: bool = Field(..., description="Whether the identity provider accepted the sign-out")
    notifications: list[NotificationView] = Field(default_factory=list)
    redirect_to: str | None = Field(None, description="Route to navigate to, if any", examples=["/login"])
