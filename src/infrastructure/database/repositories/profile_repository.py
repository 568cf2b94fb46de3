from __future__ import annotations

import logging
import os

from supabase import Client

from src.domain.entities.profile import PROFILE_FIELDS, ProfileEntity
from src.domain.exceptions import ProfileReadError, ProfileUpdateError
from src.infrastructure.database.postgres_client import get_postgres_client

logger = logging.getLogger(__name__)

# module-level in-memory store for disabled mode
_MEM_PROFILES: dict[str, ProfileEntity] = {}


class ProfileRepository:
    """Reads and writes rows of the ``profiles`` table.

    Rows are created at sign-up outside this service, so there is no insert
    path. In disabled mode an update of an unknown id creates the row.
    """

    def __init__(self, client: Client | None) -> None:
        self.client = client
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.use_local_db = os.getenv("USE_LOCAL_DB", "0") == "1"
        self.pg_client = get_postgres_client() if self.use_local_db else None

    def get(self, user_id: str) -> ProfileEntity | None:
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            try:
                row = self.pg_client.fetch_one("SELECT * FROM profiles WHERE id = %s", (user_id,))
            except Exception as exc:
                raise ProfileReadError(f"PostgreSQL select profile failed: {exc}") from exc
            return ProfileEntity.from_row(row) if row else None

        # In-memory mode
        if self.disabled or self.client is None:
            return _MEM_PROFILES.get(user_id)

        # Supabase mode
        try:
            res = self.client.table("profiles").select("*").eq("id", user_id).limit(1).execute()
        except Exception as exc:
            raise ProfileReadError(f"DB select profile failed: {exc}") from exc
        rows = res.data or []
        return ProfileEntity.from_row(rows[0]) if rows else None

    def update(self, user_id: str, fields: dict[str, str]) -> ProfileEntity:
        """Write every editable field of the profile in a single statement.

        An update that matches no row (missing profile, or one hidden by row
        level security) raises ``ProfileUpdateError`` instead of passing silently.
        """
        if not user_id:
            raise ProfileUpdateError("Cannot update a profile without a user id")
        unknown = set(fields) - set(PROFILE_FIELDS)
        if unknown:
            raise ProfileUpdateError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        data = {name: fields.get(name, "") for name in PROFILE_FIELDS}

        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            assignments = ", ".join(f"{name} = %s" for name in PROFILE_FIELDS)
            query = f"UPDATE profiles SET {assignments} WHERE id = %s RETURNING *"
            try:
                row = self.pg_client.fetch_one(query, (*data.values(), user_id))
            except Exception as exc:
                raise ProfileUpdateError(f"PostgreSQL update profile failed: {exc}") from exc
            if not row:
                raise ProfileUpdateError(f"No profile row updated for {user_id}")
            return ProfileEntity.from_row(row)

        # In-memory mode
        if self.disabled or self.client is None:
            entity = ProfileEntity(id=user_id, **data)
            _MEM_PROFILES[user_id] = entity
            logger.debug("Updated in-memory profile %s", user_id)
            return entity

        # Supabase mode
        try:
            res = self.client.table("profiles").update(data).eq("id", user_id).execute()
        except Exception as exc:
            raise ProfileUpdateError(f"DB update profile failed: {exc}") from exc
        rows = res.data or []
        if not rows:
            raise ProfileUpdateError(f"No profile row updated for {user_id}")
        return ProfileEntity.from_row(rows[0])
