from __future__ import annotations

import logging
from dataclasses import dataclass

from src.application.dtos.navigation_dto import NavActionView, NavigationView, NavLinkView
from src.application.services.feedback import Navigator, Toaster
from src.domain.entities.navigation import BRAND_NAME, AppRoute
from src.domain.entities.session import SessionEntity
from src.domain.exceptions import SignOutError
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter

logger = logging.getLogger(__name__)

SIGN_OUT_ACTION = NavActionView(name="sign_out", label="Sign Out")


@dataclass
class NavigationBar:
    session: SessionEntity | None
    auth: SupabaseAuthAdapter
    toaster: Toaster
    navigator: Navigator

    def links(self) -> list[NavLinkView]:
        links = [
            NavLinkView(label="Post a Job", href=AppRoute.POST_JOB.value),
            NavLinkView(label="Affiliates", href=AppRoute.AFFILIATES.value),
        ]
        if self.session is not None:
            links.append(NavLinkView(label="Profile", href=AppRoute.PROFILE.value))
        else:
            # both go to the same page; the login page offers sign-up
            links.append(NavLinkView(label="Log In", href=AppRoute.LOGIN.value))
            links.append(NavLinkView(label="Sign Up", href=AppRoute.LOGIN.value))
        return links

    def render(self) -> NavigationView:
        return NavigationView(
            brand=NavLinkView(label=BRAND_NAME, href=AppRoute.HOME.value),
            links=self.links(),
            actions=[SIGN_OUT_ACTION] if self.session is not None else [],
            authenticated=self.session is not None,
        )

    def sign_out(self) -> bool:
        """Sign the session out and send the user to the login page.

        A rejected sign-out leaves the session as it was: the user gets an
        error notification and stays where they are.
        """
        if self.session is None:
            raise ValueError("No session to sign out")
        try:
            self.auth.sign_out(self.session.access_token)
        except SignOutError:
            logger.exception("Sign-out failed for user %s", self.session.user_id)
            self.toaster.error("Error signing out")
            return False
        logger.info("User %s signed out", self.session.user_id)
        self.toaster.success("Signed out successfully")
        self.navigator.navigate(AppRoute.LOGIN)
        return True
