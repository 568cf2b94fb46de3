from __future__ import annotations

import logging
import os

import httpx

from src.domain.entities.session import SessionEntity
from src.domain.entities.subscription import SubscriptionDetails
from src.domain.exceptions import SubscriptionFetchError, SubscriptionStartError

logger = logging.getLogger(__name__)

DETAILS_PATH = "/api/get-subscription-details"
CHECKOUT_PATH = "/api/create-checkout-session"

# subscription payloads served while no endpoint is configured, keyed by user id
_MEM_SUBSCRIPTIONS: dict[str, dict | None] = {}


class SubscriptionClient:
    """HTTP client for the hosted subscription endpoints.

    Without SUBSCRIPTION_API_URL the client answers from an in-memory table
    and never touches the network.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("SUBSCRIPTION_API_URL", "")).rstrip("/")
        self.disabled = not self.base_url
        timeout = os.getenv("SUBSCRIPTION_API_TIMEOUT")
        self._client_kwargs: dict = {"transport": transport}
        if timeout:
            self._client_kwargs["timeout"] = float(timeout)

    def _http(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, **self._client_kwargs)

    @staticmethod
    def _auth_headers(session: SessionEntity) -> dict[str, str]:
        return {"Authorization": f"Bearer {session.access_token}"}

    def get_details(self, session: SessionEntity) -> SubscriptionDetails | None:
        if self.disabled:
            return SubscriptionDetails.from_payload(
                _MEM_SUBSCRIPTIONS.get(session.user_id, {"subscription": None})
            )
        try:
            with self._http() as http:
                response = http.get(DETAILS_PATH, headers=self._auth_headers(session))
        except httpx.HTTPError as exc:
            raise SubscriptionFetchError(f"Subscription request failed: {exc}") from exc
        if response.is_error:
            raise SubscriptionFetchError(
                f"Failed to fetch subscription details: HTTP {response.status_code}"
            )
        try:
            return SubscriptionDetails.from_payload(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise SubscriptionFetchError(f"Malformed subscription details: {exc}") from exc

    def start_subscription(self, session: SessionEntity, plan_id: str) -> str | None:
        """Open a checkout for ``plan_id`` and return its URL when the endpoint gives one."""
        if self.disabled:
            logger.info("Checkout for plan %s requested with no subscription endpoint", plan_id)
            return None
        try:
            with self._http() as http:
                response = http.post(
                    CHECKOUT_PATH,
                    headers=self._auth_headers(session),
                    json={"priceId": plan_id},
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise SubscriptionStartError(f"Checkout for {plan_id} failed: {exc}") from exc
        try:
            body = response.json()
        except ValueError:
            return None
        return body.get("url") if isinstance(body, dict) else None
