from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionEntity:
    access_token: str
    user_id: str
    email: str | None = None
