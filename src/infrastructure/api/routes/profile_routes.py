from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.application.components.profile_form import EXTEND_PLAN_ID, PROFILE_QUERY_KEY, ProfileForm
from src.application.dtos.common_dto import NotificationView
from src.application.dtos.profile_dto import (
    ExtendSubscriptionResponse,
    FormType,
    ProfileDraftBody,
    ProfileFormView,
    ProfileResponse,
    SubmitProfileResponse,
    SubscriptionDetailsResponse,
)
from src.application.services.feedback import Toaster
from src.domain.entities.profile import ProfileEntity
from src.domain.entities.session import SessionEntity
from src.domain.exceptions import SubscriptionStartError
from src.infrastructure.api.dependencies import (
    get_cache,
    get_current_session,
    get_profile_repo,
    get_subscription_client,
    get_toaster,
)
from src.infrastructure.billing.subscription_client import SubscriptionClient
from src.infrastructure.cache.query_cache import QueryCache
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/profile",
    tags=["Profile"],
    responses={
        401: {"description": "Unauthorized - Invalid or missing authentication token"},
        422: {"description": "Validation Error - Invalid request format"},
        502: {"description": "Bad Gateway - The profile store could not be read"},
    },
)


def _load_profile(session: SessionEntity, profiles: ProfileRepository, cache: QueryCache) -> ProfileEntity:
    state = cache.fetch((*PROFILE_QUERY_KEY, session.user_id), lambda: profiles.get(session.user_id))
    if state.is_error:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to load profile")
    # the row is created at sign-up; an empty profile stands in until then
    return state.data or ProfileEntity(id=session.user_id)


def _build_form(
    form_type: str,
    session: SessionEntity,
    profiles: ProfileRepository,
    subscriptions: SubscriptionClient,
    cache: QueryCache,
    toaster: Toaster,
) -> ProfileForm:
    form = ProfileForm(
        _load_profile(session, profiles, cache),
        form_type,
        session=session,
        profiles=profiles,
        subscriptions=subscriptions,
        cache=cache,
        toaster=toaster,
    )
    form.mount()
    return form


@router.get(
    "",
    response_model=ProfileResponse,
    summary="Get Profile",
    description="""
    The stored profile of the authenticated user. Reads are cached and the
    cache is dropped whenever a profile form submit succeeds.

    **Authentication required**: Yes (Bearer token)
    """,
)
def get_profile(
    session: SessionEntity = Depends(get_current_session),
    profiles: ProfileRepository = Depends(get_profile_repo),
    cache: QueryCache = Depends(get_cache),
):
    """Get the current user's profile."""
    return ProfileResponse.from_entity(_load_profile(session, profiles, cache))


@router.get(
    "/subscription",
    response_model=SubscriptionDetailsResponse,
    summary="Get Subscription Details",
    description="""
    The user's current subscription, or `subscription: null` when there is none.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={502: {"description": "Bad Gateway - The subscription endpoint failed"}},
)
def get_subscription(
    session: SessionEntity = Depends(get_current_session),
    profiles: ProfileRepository = Depends(get_profile_repo),
    subscriptions: SubscriptionClient = Depends(get_subscription_client),
    cache: QueryCache = Depends(get_cache),
    toaster: Toaster = Depends(get_toaster),
):
    """Get the current user's subscription summary."""
    form = _build_form("billing", session, profiles, subscriptions, cache, toaster)
    if form.subscription_query.is_error:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch subscription details"
        )
    return SubscriptionDetailsResponse(subscription=form.render().subscription)


@router.get(
    "/form/{form_type}",
    response_model=ProfileFormView,
    summary="Render Profile Form Tab",
    description="""
    One tab of the profile form (`personal`, `billing` or `preferences`) with
    the draft seeded from the stored profile. The billing tab includes the
    subscription summary when one is active.

    **Authentication required**: Yes (Bearer token)
    """,
)
def render_form(
    form_type: FormType,
    session: SessionEntity = Depends(get_current_session),
    profiles: ProfileRepository = Depends(get_profile_repo),
    subscriptions: SubscriptionClient = Depends(get_subscription_client),
    cache: QueryCache = Depends(get_cache),
    toaster: Toaster = Depends(get_toaster),
):
    """Render a profile form tab."""
    return _build_form(form_type, session, profiles, subscriptions, cache, toaster).render()


@router.post(
    "/form/{form_type}",
    response_model=SubmitProfileResponse,
    summary="Submit Profile Form",
    description="""
    Save the complete form draft. All six profile fields are written on every
    submit, whichever tab is active.

    A failed write still answers 200 with `ok: false` and an error
    notification; the submitted values come back in the form so the user can
    resubmit.

    **Authentication required**: Yes (Bearer token)
    """,
)
def submit_form(
    form_type: FormType,
    body: ProfileDraftBody,
    session: SessionEntity = Depends(get_current_session),
    profiles: ProfileRepository = Depends(get_profile_repo),
    subscriptions: SubscriptionClient = Depends(get_subscription_client),
    cache: QueryCache = Depends(get_cache),
    toaster: Toaster = Depends(get_toaster),
):
    """Apply the draft and submit it."""
    form = _build_form(form_type, session, profiles, subscriptions, cache, toaster)
    for name, value in body.model_dump().items():
        if getattr(form.draft, name) != value:
            form.change(name, value)
    ok = form.submit()
    return SubmitProfileResponse(
        ok=ok,
        form=form.render(),
        notifications=[NotificationView.from_notification(n) for n in toaster.notifications],
    )


@router.post(
    "/billing/extend",
    response_model=ExtendSubscriptionResponse,
    summary="Extend Subscription",
    description="""
    Start a checkout for the weekly plan. Only available while the user has an
    active subscription.

    **Authentication required**: Yes (Bearer token)
    """,
    responses={
        409: {"description": "Conflict - No active subscription to extend"},
        502: {"description": "Bad Gateway - Checkout could not be started"},
    },
)
def extend_subscription(
    session: SessionEntity = Depends(get_current_session),
    profiles: ProfileRepository = Depends(get_profile_repo),
    subscriptions: SubscriptionClient = Depends(get_subscription_client),
    cache: QueryCache = Depends(get_cache),
    toaster: Toaster = Depends(get_toaster),
):
    """Trigger the subscription purchase flow."""
    form = _build_form("billing", session, profiles, subscriptions, cache, toaster)
    try:
        url = form.extend_subscription()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except SubscriptionStartError as exc:
        logger.exception("Checkout start failed for %s", session.user_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return ExtendSubscriptionResponse(plan_id=EXTEND_PLAN_ID, checkout_url=url)
