from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.application.components.navigation_bar import NavigationBar
from src.application.dtos.common_dto import NotificationView
from src.application.dtos.navigation_dto import SignOutResponse
from src.application.services.feedback import Navigator, Toaster
from src.domain.entities.session import SessionEntity
from src.infrastructure.api.dependencies import (
    get_auth_adapter,
    get_current_session,
    get_navigator,
    get_toaster,
)
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Unauthorized - Invalid or missing authentication token"},
        422: {"description": "Validation Error - Invalid request format"}
    }
)


class SessionResponse(BaseModel):
    """Response model for the current session."""
    user_id: str = Field(..., description="Unique identifier of the authenticated user")
    email: str | None = Field(None, description="Email address of the authenticated user", examples=["user@example.com"])


@router.get(
    "/session",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Get Current Session",
    description="""
    Validate the bearer token and describe the session it belongs to.

    **Authentication required**: Yes (Bearer token)
    """,
    response_description="The authenticated user behind the token"
)
def get_session(session: SessionEntity = Depends(get_current_session)):
    """Return the session for the supplied token."""
    return {"user_id": session.user_id, "email": session.email}


@router.post(
    "/sign-out",
    response_model=SignOutResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign Out",
    description="""
    End the current session with the identity provider.

    On success the response carries a success notification and
    `redirect_to: "/login"`. If the provider rejects the sign-out the response
    is still 200, with `ok: false`, an error notification and no redirect;
    the session stays valid.

    **Authentication required**: Yes (Bearer token)
    """,
    response_description="Outcome of the sign-out with notifications to show"
)
def sign_out(
    session: SessionEntity = Depends(get_current_session),
    auth: SupabaseAuthAdapter = Depends(get_auth_adapter),
    toaster: Toaster = Depends(get_toaster),
    navigator: Navigator = Depends(get_navigator),
):
    """Sign out through the navigation bar."""
    navbar = NavigationBar(session=session, auth=auth, toaster=toaster, navigator=navigator)
    ok = navbar.sign_out()
    return SignOutResponse(
        ok=ok,
        notifications=[NotificationView.from_notification(n) for n in toaster.notifications],
        redirect_to=navigator.redirect_to.value if navigator.redirect_to else None,
    )
