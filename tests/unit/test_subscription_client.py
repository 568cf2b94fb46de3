"""
Tests for the subscription endpoint client.
"""
from __future__ import annotations

import json

import httpx
import pytest

from src.domain.exceptions import SubscriptionFetchError, SubscriptionStartError
from src.infrastructure.billing.subscription_client import _MEM_SUBSCRIPTIONS, SubscriptionClient

ACTIVE = {
    "subscription": {
        "name": "Copper Weekly",
        "current_period_start": 1700000000,
        "current_period_end": 1700604800,
    }
}


def client_for(handler) -> SubscriptionClient:
    return SubscriptionClient("https://billing.test", transport=httpx.MockTransport(handler))


def test_details_sent_with_bearer_token(session):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json=ACTIVE)

    details = client_for(handler).get_details(session)

    assert seen == {"path": "/api/get-subscription-details", "auth": "Bearer tok-123"}
    assert details.subscription.name == "Copper Weekly"
    assert details.subscription.current_period_end == 1700604800


def test_details_without_subscription(session):
    details = client_for(lambda request: httpx.Response(200, json={"subscription": None})).get_details(session)
    assert details is not None
    assert details.subscription is None


def test_null_body_means_no_details(session):
    assert client_for(lambda request: httpx.Response(200, content=b"null")).get_details(session) is None


def test_error_status_is_not_treated_as_empty(session):
    with pytest.raises(SubscriptionFetchError):
        client_for(lambda request: httpx.Response(500, text="boom")).get_details(session)


def test_transport_error_raises_fetch_error(session):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(SubscriptionFetchError):
        client_for(handler).get_details(session)


def test_malformed_body_raises_fetch_error(session):
    with pytest.raises(SubscriptionFetchError):
        client_for(lambda request: httpx.Response(200, json={"subscription": {"name": "x"}})).get_details(session)


def test_start_subscription_posts_plan(session):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"url": "https://checkout.test/s/1"})

    url = client_for(handler).start_subscription(session, "price_copper_weekly")

    assert url == "https://checkout.test/s/1"
    assert seen == {
        "method": "POST",
        "path": "/api/create-checkout-session",
        "body": {"priceId": "price_copper_weekly"},
    }


def test_start_subscription_failure(session):
    with pytest.raises(SubscriptionStartError):
        client_for(lambda request: httpx.Response(400, json={"error": "bad price"})).start_subscription(
            session, "price_copper_weekly"
        )


def test_unconfigured_client_serves_memory_table(session):
    client = SubscriptionClient()
    assert client.disabled
    assert client.get_details(session).subscription is None

    _MEM_SUBSCRIPTIONS[session.user_id] = ACTIVE
    assert client.get_details(session).subscription.name == "Copper Weekly"
    assert client.start_subscription(session, "price_copper_weekly") is None
