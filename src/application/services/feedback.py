from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from src.domain.entities.navigation import AppRoute

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    kind: Literal["success", "error"]
    message: str


@dataclass
class Toaster:
    """Collects the toast notifications a request produces."""

    notifications: list[Notification] = field(default_factory=list)

    def success(self, message: str) -> None:
        self.notifications.append(Notification("success", message))

    def error(self, message: str) -> None:
        logger.info("Error notification: %s", message)
        self.notifications.append(Notification("error", message))


@dataclass
class Navigator:
    redirect_to: AppRoute | None = None

    def navigate(self, route: AppRoute) -> None:
        self.redirect_to = route
