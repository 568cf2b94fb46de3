from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

# Editable columns of the profiles table, in form order
PROFILE_FIELDS: tuple[str, ...] = (
    "full_name",
    "username",  # shown as the email address
    "website",  # LinkedIn URL
    "billing_address",
    "phone_number",
    "company_name",
)


@dataclass(frozen=True)
class ProfileEntity:
    id: str  # user id from Supabase auth
    full_name: str = ""
    username: str = ""
    website: str = ""
    billing_address: str = ""
    phone_number: str = ""
    company_name: str = ""

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> ProfileEntity:
        """Build an entity from a database row, treating NULL columns as empty."""
        values = {name: row.get(name) or "" for name in PROFILE_FIELDS}
        return cls(id=row["id"], **values)

    def editable_fields(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in PROFILE_FIELDS}


@dataclass
class ProfileDraft:
    """Uncommitted edit buffer for a profile."""

    full_name: str = ""
    username: str = ""
    website: str = ""
    billing_address: str = ""
    phone_number: str = ""
    company_name: str = ""
    _touched: set[str] = field(default_factory=set, repr=False, compare=False)

    @classmethod
    def from_profile(cls, profile: ProfileEntity | None) -> ProfileDraft:
        if profile is None:
            return cls()
        return cls(**profile.editable_fields())

    def set(self, name: str, value: str) -> None:
        if name not in PROFILE_FIELDS:
            raise ValueError(f"Unknown profile field: {name}")
        setattr(self, name, value)
        self._touched.add(name)

    @property
    def touched(self) -> frozenset[str]:
        return frozenset(self._touched)

    def as_payload(self) -> dict[str, str]:
        # Always the full field set, never only the touched ones
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name in PROFILE_FIELDS}
