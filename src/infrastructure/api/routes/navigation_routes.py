from __future__ import annotations

from fastapi import APIRouter, Depends

from src.application.components.navigation_bar import NavigationBar
from src.application.dtos.navigation_dto import NavigationView
from src.application.services.feedback import Navigator, Toaster
from src.domain.entities.session import SessionEntity
from src.infrastructure.api.dependencies import get_auth_adapter, get_optional_session
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter

router = APIRouter(prefix="/navigation", tags=["Navigation"])


@router.get(
    "",
    response_model=NavigationView,
    summary="Navigation Bar",
    description="""
    Links and actions for the site navigation bar.

    Signed-in users get a Profile link and a Sign Out action; anonymous
    visitors get Log In and Sign Up. An invalid token is treated as anonymous.

    **Authentication required**: No (Bearer token optional)
    """,
)
def get_navigation(
    session: SessionEntity | None = Depends(get_optional_session),
    auth: SupabaseAuthAdapter = Depends(get_auth_adapter),
):
    """Render the navigation bar for the caller."""
    return NavigationBar(session=session, auth=auth, toaster=Toaster(), navigator=Navigator()).render()
