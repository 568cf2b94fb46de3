from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.application.services.feedback import Navigator, Toaster
from src.domain.entities.session import SessionEntity
from src.infrastructure.billing.subscription_client import SubscriptionClient
from src.infrastructure.cache.query_cache import QueryCache, get_query_cache
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter, get_user_supabase_client

_bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_adapter() -> SupabaseAuthAdapter:
    return SupabaseAuthAdapter()


def _bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if not credentials or not credentials.scheme or credentials.scheme.lower() != "bearer":
        return None
    return credentials.credentials or None


def get_current_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(_bearer_scheme)] = None,
    auth: Annotated[SupabaseAuthAdapter, Depends(get_auth_adapter)] = None,
) -> SessionEntity:
    token = _bearer_token(credentials)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    try:
        return auth.validate_token(token)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))


def get_optional_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(_bearer_scheme)] = None,
    auth: Annotated[SupabaseAuthAdapter, Depends(get_auth_adapter)] = None,
) -> SessionEntity | None:
    return auth.get_session(_bearer_token(credentials))


def get_profile_repo(
    session: Annotated[SessionEntity, Depends(get_current_session)],
) -> ProfileRepository:
    # profile rows are read and written as the signed-in user
    return ProfileRepository(get_user_supabase_client(session.access_token))


def get_subscription_client() -> SubscriptionClient:
    return SubscriptionClient()


def get_cache() -> QueryCache:
    return get_query_cache()


def get_toaster() -> Toaster:
    return Toaster()


def get_navigator() -> Navigator:
    return Navigator()
