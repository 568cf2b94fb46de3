"""Failures raised by the Supabase and billing adapters."""
from __future__ import annotations


class SignOutError(RuntimeError):
    """The identity provider rejected a sign-out."""


class ProfileReadError(RuntimeError):
    """Loading a profile row failed."""


class ProfileUpdateError(RuntimeError):
    """Writing a profile row failed."""


class SubscriptionFetchError(RuntimeError):
    """The subscription endpoint could not be read. Distinct from "no subscription"."""


class SubscriptionStartError(RuntimeError):
    """Starting a subscription checkout failed."""
