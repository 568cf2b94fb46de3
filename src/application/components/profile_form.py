from __future__ import annotations

import logging
from typing import Literal, get_args

from src.application.dtos.profile_dto import (
    ActionView,
    FormFieldView,
    FormType,
    ProfileFormView,
    SubmitButtonView,
    SubscriptionSummaryView,
)
from src.application.services.feedback import Toaster
from src.domain.entities.profile import ProfileDraft, ProfileEntity
from src.domain.entities.session import SessionEntity
from src.domain.entities.subscription import SubscriptionDetails
from src.domain.exceptions import ProfileUpdateError
from src.infrastructure.billing.subscription_client import SubscriptionClient
from src.infrastructure.cache.query_cache import QueryCache, QueryState
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

FORM_TYPES: tuple[str, ...] = get_args(FormType)
EXTEND_PLAN_ID = "price_copper_weekly"
PROFILE_QUERY_KEY = ("profile",)
SUBSCRIPTION_QUERY_KEY = ("subscription-details",)

NO_SUBSCRIPTION_MESSAGE = "No active subscription found."
PREFERENCES_MESSAGE = "Job preferences can be updated from the main jobs page filters."

# (field, label, placeholder) per editable tab
_TAB_FIELDS: dict[str, list[tuple[str, str, str | None]]] = {
    "personal": [
        ("full_name", "Full Name", None),
        ("username", "Email", None),
        ("website", "LinkedIn Profile", "https://linkedin.com/in/username"),
    ],
    "billing": [
        ("billing_address", "Billing Address", None),
        ("phone_number", "Phone Number", None),
        ("company_name", "Company Name", None),
    ],
    "preferences": [],
}

_TITLES = {
    "personal": "Personal Information",
    "billing": "Billing Information",
    "preferences": "Preferences",
}


class ProfileForm:
    """Tabbed profile editor.

    The draft is copied from ``profile`` once, when the form is built; later
    changes to the stored profile are not pulled into an open form. A submit
    always writes all six fields, whichever tab is showing.
    """

    def __init__(
        self,
        profile: ProfileEntity | None,
        form_type: str,
        *,
        session: SessionEntity | None,
        profiles: ProfileRepository,
        subscriptions: SubscriptionClient,
        cache: QueryCache,
        toaster: Toaster,
    ) -> None:
        if form_type not in FORM_TYPES:
            raise ValueError(f"Unknown profile form type: {form_type}")
        self.form_type = form_type
        self.session = session
        self.profiles = profiles
        self.subscriptions = subscriptions
        self.cache = cache
        self.toaster = toaster
        self.draft = ProfileDraft.from_profile(profile)
        self.status: Literal["idle", "submitting"] = "idle"
        self.subscription_query: QueryState | None = None

    @property
    def is_submitting(self) -> bool:
        return self.status == "submitting"

    def _fetch_subscription(self) -> SubscriptionDetails | None:
        if self.session is None:
            return None
        return self.subscriptions.get_details(self.session)

    def mount(self) -> QueryState:
        user_id = self.session.user_id if self.session else None
        self.subscription_query = self.cache.fetch(
            (*SUBSCRIPTION_QUERY_KEY, user_id), self._fetch_subscription
        )
        return self.subscription_query

    def change(self, name: str, value: str) -> None:
        self.draft.set(name, value)

    def submit(self) -> bool:
        if self.is_submitting:
            return False
        if self.session is None:
            self.toaster.error("You must be signed in to update your profile")
            return False

        self.status = "submitting"
        try:
            self.profiles.update(self.session.user_id, self.draft.as_payload())
        except ProfileUpdateError:
            logger.exception(
                "Error updating profile %s (changed: %s)",
                self.session.user_id,
                ", ".join(sorted(self.draft.touched)) or "none",
            )
            self.toaster.error("Failed to update profile")
            return False
        finally:
            self.status = "idle"

        self.cache.invalidate(PROFILE_QUERY_KEY)
        self.toaster.success("Profile updated successfully")
        return True

    @property
    def subscription(self) -> SubscriptionDetails | None:
        if self.subscription_query is None or self.subscription_query.is_error:
            return None
        return self.subscription_query.data

    def _extend_available(self) -> bool:
        details = self.subscription
        return self.form_type == "billing" and details is not None and details.subscription is not None

    def extend_subscription(self) -> str | None:
        if not self._extend_available():
            raise ValueError("No active subscription to extend")
        return self.subscriptions.start_subscription(self.session, EXTEND_PLAN_ID)

    def _subscription_summary(self) -> SubscriptionSummaryView | None:
        if not self._extend_available():
            return None
        sub = self.subscription.subscription
        return SubscriptionSummaryView(
            plan=sub.name,
            started=sub.started_on,
            expires=sub.expires_on,
            extend_action=ActionView(
                name="extend_subscription", label="Extend Subscription", plan_id=EXTEND_PLAN_ID
            ),
        )

    def render(self) -> ProfileFormView:
        view = ProfileFormView(
            type=self.form_type,
            title=_TITLES[self.form_type],
            fields=[
                FormFieldView(name=name, label=label, value=getattr(self.draft, name), placeholder=placeholder)
                for name, label, placeholder in _TAB_FIELDS[self.form_type]
            ],
            submit=SubmitButtonView(
                label="Saving..." if self.is_submitting else "Save Changes",
                disabled=self.is_submitting,
            ),
        )
        if self.form_type == "billing":
            view.subscription = self._subscription_summary()
            if view.subscription is None:
                view.message = NO_SUBSCRIPTION_MESSAGE
                view.subscription_unavailable = bool(
                    self.subscription_query and self.subscription_query.is_error
                )
        elif self.form_type == "preferences":
            view.message = PREFERENCES_MESSAGE
        return view
