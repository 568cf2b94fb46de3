from __future__ import annotations

import hashlib
import logging
import os

from supabase import Client, create_client

from src.domain.entities.session import SessionEntity
from src.domain.exceptions import SignOutError

logger = logging.getLogger(__name__)

# tokens signed out while SUPABASE_DISABLED=1, oldest first; only the newest
# _MAX_REVOKED_TOKENS are remembered and the table is lost on restart
_REVOKED_TOKENS: dict[str, None] = {}
_MAX_REVOKED_TOKENS = 10_000


class SupabaseAuthAdapter:
    """Session provider backed by Supabase Auth.

    When SUPABASE_DISABLED=1, any token that has not been signed out maps to a
    fake user.
    """

    def __init__(self) -> None:
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.url = os.getenv("SUPABASE_URL")
        self.key = os.getenv("SUPABASE_ANON_KEY")
        self.service_key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
        self._client: Client | None = None
        if not self.disabled and self.url and self.key:
            self._client = create_client(self.url, self.key)

    def validate_token(self, token: str) -> SessionEntity:
        if not token:
            raise ValueError("Missing access token")
        if self.disabled or not self._client:
            if token in _REVOKED_TOKENS:
                raise ValueError("Invalid access token: session signed out")
            digest = hashlib.sha256(token.encode("utf-8")).hexdigest()[:10]
            return SessionEntity(access_token=token, user_id=f"fake-{digest}", email=None)
        try:  # pragma: no cover - network
            res = self._client.auth.get_user(token)
            user = res.user if res else None
        except Exception as exc:  # pragma: no cover - network
            raise ValueError(f"Invalid access token: {exc}") from exc
        if not user:  # pragma: no cover - network
            raise ValueError("Invalid access token")
        return SessionEntity(access_token=token, user_id=user.id, email=user.email)

    def get_session(self, token: str | None) -> SessionEntity | None:
        """Current session for ``token``, or ``None`` when absent or no longer valid."""
        if not token:
            return None
        try:
            return self.validate_token(token)
        except ValueError:
            logger.debug("Treating request as anonymous: token rejected")
            return None

    def sign_out(self, token: str) -> None:
        if self.disabled or not self._client:
            _REVOKED_TOKENS[token] = None
            while len(_REVOKED_TOKENS) > _MAX_REVOKED_TOKENS:
                del _REVOKED_TOKENS[next(iter(_REVOKED_TOKENS))]
            return
        try:  # pragma: no cover - network
            # revoking another user's JWT needs the service role key
            admin = create_client(self.url, self.service_key) if self.service_key else self._client
            admin.auth.admin.sign_out(token)
        except Exception as exc:  # pragma: no cover - network
            raise SignOutError(f"Supabase sign-out failed: {exc}") from exc


def get_user_supabase_client(access_token: str) -> Client | None:
    """Client whose table requests run as the signed-in user, so row level security applies."""
    disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_ANON_KEY")
    if disabled or not url or not key:
        return None
    client = create_client(url, key)
    client.postgrest.auth(access_token)
    return client
