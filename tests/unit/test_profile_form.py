"""
Tests for the profile form component.
"""
from __future__ import annotations

from unittest.mock import Mock

import pytest

from src.application.components.profile_form import (
    NO_SUBSCRIPTION_MESSAGE,
    PREFERENCES_MESSAGE,
    ProfileForm,
)
from src.application.services.feedback import Toaster
from src.domain.entities.profile import PROFILE_FIELDS, ProfileEntity
from src.domain.entities.subscription import Subscription, SubscriptionDetails
from src.domain.exceptions import ProfileUpdateError, SubscriptionFetchError
from src.infrastructure.cache.query_cache import QueryCache

ADA = ProfileEntity(
    id="user_1",
    full_name="Ada",
    username="ada@x.com",
    website="",
    billing_address="",
    phone_number="",
    company_name="",
)

WEEKLY = SubscriptionDetails(
    subscription=Subscription(
        name="Copper Weekly",
        current_period_start=1700000000,
        current_period_end=1700604800,
    )
)


@pytest.fixture
def deps():
    profiles = Mock()
    subscriptions = Mock()
    subscriptions.get_details.return_value = SubscriptionDetails(subscription=None)
    cache = QueryCache(stale_time=60)
    toaster = Toaster()
    return profiles, subscriptions, cache, toaster


def make_form(deps, session, form_type="personal", profile=ADA):
    profiles, subscriptions, cache, toaster = deps
    return ProfileForm(
        profile,
        form_type,
        session=session,
        profiles=profiles,
        subscriptions=subscriptions,
        cache=cache,
        toaster=toaster,
    )


def messages(toaster):
    return [(n.kind, n.message) for n in toaster.notifications]


class TestRender:
    def test_personal_fields_prefilled(self, deps, session):
        view = make_form(deps, session).render()
        assert view.title == "Personal Information"
        assert [(f.name, f.label, f.value) for f in view.fields] == [
            ("full_name", "Full Name", "Ada"),
            ("username", "Email", "ada@x.com"),
            ("website", "LinkedIn Profile", ""),
        ]
        assert view.fields[2].placeholder == "https://linkedin.com/in/username"
        assert view.submit.label == "Save Changes"
        assert view.submit.disabled is False

    def test_preferences_is_informational(self, deps, session):
        view = make_form(deps, session, "preferences").render()
        assert view.title == "Preferences"
        assert view.fields == []
        assert view.message == PREFERENCES_MESSAGE

    def test_unknown_type_rejected(self, deps, session):
        with pytest.raises(ValueError):
            make_form(deps, session, "security")

    def test_missing_profile_seeds_empty_draft(self, deps, session):
        form = make_form(deps, session, profile=None)
        assert form.draft.as_payload() == {name: "" for name in PROFILE_FIELDS}

    def test_draft_is_a_copy_of_the_profile(self, deps, session):
        form = make_form(deps, session)
        form.change("full_name", "Ada L")
        assert ADA.full_name == "Ada"
        assert form.render().fields[0].value == "Ada L"


class TestBilling:
    def test_null_subscription_shows_message(self, deps, session):
        form = make_form(deps, session, "billing")
        form.mount()
        view = form.render()
        assert view.title == "Billing Information"
        assert view.subscription is None
        assert view.message == NO_SUBSCRIPTION_MESSAGE
        assert view.subscription_unavailable is False
        assert [f.name for f in view.fields] == ["billing_address", "phone_number", "company_name"]

    def test_active_subscription_summary(self, deps, session):
        deps[1].get_details.return_value = WEEKLY
        form = make_form(deps, session, "billing")
        form.mount()
        view = form.render()
        assert view.message is None
        assert view.subscription.plan == "Copper Weekly"
        assert view.subscription.started == "November 14th, 2023"
        assert view.subscription.expires == "November 21st, 2023"
        assert view.subscription.extend_action.label == "Extend Subscription"
        assert view.subscription.extend_action.plan_id == "price_copper_weekly"

    def test_no_session_skips_network(self, deps):
        profiles, subscriptions, _, _ = deps
        form = make_form(deps, None, "billing")
        state = form.mount()
        subscriptions.get_details.assert_not_called()
        assert state.data is None
        assert form.render().message == NO_SUBSCRIPTION_MESSAGE

    def test_read_failure_is_flagged(self, deps, session):
        deps[1].get_details.side_effect = SubscriptionFetchError("HTTP 500")
        form = make_form(deps, session, "billing")
        form.mount()
        view = form.render()
        assert view.message == NO_SUBSCRIPTION_MESSAGE
        assert view.subscription is None
        assert view.subscription_unavailable is True

    def test_subscription_read_is_cached(self, deps, session):
        _, subscriptions, cache, _ = deps
        make_form(deps, session, "billing").mount()
        make_form(deps, session, "personal").mount()
        assert subscriptions.get_details.call_count == 1

    def test_extend_starts_fixed_plan(self, deps, session):
        _, subscriptions, _, _ = deps
        subscriptions.get_details.return_value = WEEKLY
        subscriptions.start_subscription.return_value = "https://checkout.test/s/1"
        form = make_form(deps, session, "billing")
        form.mount()
        assert form.extend_subscription() == "https://checkout.test/s/1"
        subscriptions.start_subscription.assert_called_once_with(session, "price_copper_weekly")

    def test_extend_without_subscription_rejected(self, deps, session):
        form = make_form(deps, session, "billing")
        form.mount()
        with pytest.raises(ValueError):
            form.extend_subscription()
        deps[1].start_subscription.assert_not_called()


class TestSubmit:
    def test_edit_sends_full_payload(self, deps, session):
        profiles, _, _, toaster = deps
        form = make_form(deps, session)
        form.change("full_name", "Ada L")

        assert form.submit() is True

        profiles.update.assert_called_once_with(
            "user_1",
            {
                "full_name": "Ada L",
                "username": "ada@x.com",
                "website": "",
                "billing_address": "",
                "phone_number": "",
                "company_name": "",
            },
        )
        assert messages(toaster) == [("success", "Profile updated successfully")]

    def test_unchanged_draft_still_sends_every_field(self, deps, session):
        profiles, _, _, _ = deps
        make_form(deps, session, "billing").submit()
        _, payload = profiles.update.call_args.args
        assert set(payload) == set(PROFILE_FIELDS)

    def test_unknown_field_rejected(self, deps, session):
        form = make_form(deps, session)
        with pytest.raises(ValueError):
            form.change("email", "x")

    def test_success_invalidates_profile_queries(self, deps, session):
        _, _, cache, _ = deps
        cache.fetch(("profile", "user_1"), lambda: ADA)
        cache.fetch(("jobs",), lambda: [])
        make_form(deps, session).submit()
        assert cache.get(("profile", "user_1")) is None
        assert cache.get(("jobs",)) is not None

    def test_button_disabled_only_while_pending(self, deps, session):
        profiles, _, _, _ = deps
        form = make_form(deps, session)
        seen = []
        profiles.update.side_effect = lambda user_id, fields: seen.append(form.render().submit)

        assert form.render().submit.disabled is False
        form.submit()

        assert seen[0].disabled is True
        assert seen[0].label == "Saving..."
        assert form.render().submit.disabled is False
        assert form.status == "idle"

    def test_failure_keeps_draft_and_reenables(self, deps, session):
        profiles, _, cache, toaster = deps
        cache.fetch(("profile", "user_1"), lambda: ADA)
        form = make_form(deps, session)
        form.change("phone_number", "555-0100")
        profiles.update.side_effect = ProfileUpdateError("permission denied")

        assert form.submit() is False

        assert messages(toaster) == [("error", "Failed to update profile")]
        assert form.draft.phone_number == "555-0100"
        assert form.draft.full_name == "Ada"
        assert form.render().submit.disabled is False
        # nothing written, nothing to refresh
        assert cache.get(("profile", "user_1")) is not None

    def test_resubmit_after_failure(self, deps, session):
        profiles, _, _, toaster = deps
        profiles.update.side_effect = [ProfileUpdateError("timeout"), None]
        form = make_form(deps, session)
        assert form.submit() is False
        assert form.submit() is True
        assert profiles.update.call_count == 2
        assert messages(toaster)[-1] == ("success", "Profile updated successfully")

    def test_duplicate_submit_ignored_while_pending(self, deps, session):
        profiles, _, _, _ = deps
        form = make_form(deps, session)
        nested = []
        profiles.update.side_effect = lambda user_id, fields: nested.append(form.submit())

        form.submit()

        assert nested == [False]
        assert profiles.update.call_count == 1

    def test_no_session_sends_nothing(self, deps):
        profiles, _, _, toaster = deps
        form = make_form(deps, None)
        assert form.submit() is False
        profiles.update.assert_not_called()
        assert messages(toaster) == [("error", "You must be signed in to update your profile")]

    def test_write_matching_no_row_reports_failure(self, deps, session, monkeypatch):
        from src.infrastructure.database.repositories.profile_repository import ProfileRepository

        monkeypatch.setenv("SUPABASE_DISABLED", "0")
        client = Mock()
        client.table.return_value.update.return_value.eq.return_value.execute.return_value.data = []
        _, subscriptions, cache, toaster = deps
        form = ProfileForm(
            ADA,
            "personal",
            session=session,
            profiles=ProfileRepository(client),
            subscriptions=subscriptions,
            cache=cache,
            toaster=toaster,
        )
        form.change("full_name", "Ada L")

        assert form.submit() is False

        assert messages(toaster) == [("error", "Failed to update profile")]
        assert form.draft.full_name == "Ada L"
