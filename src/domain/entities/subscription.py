from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return f"{day}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_period_date(epoch_seconds: int | float) -> str:
    """Long date for a billing period boundary, e.g. ``November 14th, 2023`` (UTC)."""
    moment = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return f"{moment.strftime('%B')} {_ordinal(moment.day)}, {moment.year}"


@dataclass(frozen=True)
class Subscription:
    name: str
    current_period_start: int  # epoch seconds
    current_period_end: int  # epoch seconds

    @property
    def started_on(self) -> str:
        return format_period_date(self.current_period_start)

    @property
    def expires_on(self) -> str:
        return format_period_date(self.current_period_end)


@dataclass(frozen=True)
class SubscriptionDetails:
    subscription: Subscription | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> SubscriptionDetails | None:
        """Parse the subscription endpoint body; a JSON ``null`` body yields ``None``."""
        if payload is None:
            return None
        raw = payload.get("subscription")
        if raw is None:
            return cls(subscription=None)
        return cls(
            subscription=Subscription(
                name=raw["name"],
                current_period_start=int(raw["current_period_start"]),
                current_period_end=int(raw["current_period_end"]),
            )
        )
