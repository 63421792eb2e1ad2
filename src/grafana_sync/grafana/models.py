"""Data models for Grafana API organization, user and membership records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Grafana API JSON field names
FIELD_ORG_ID = "orgId"
FIELD_USER_ID = "userId"
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_ROLE = "role"
FIELD_LOGIN = "login"
FIELD_EMAIL = "email"
FIELD_AVATAR_URL = "avatarUrl"
FIELD_IS_DISABLED = "isDisabled"
FIELD_LAST_SEEN_AT = "lastSeenAt"
FIELD_LAST_SEEN_AT_AGE = "lastSeenAtAge"
FIELD_AUTH_LABELS = "authLabels"
FIELD_IS_EXTERNALLY_SYNCED = "isExternallySynced"


def _user_id(raw: dict[str, Any]) -> int:
    """Return the user id, which org listings call ``userId`` and global listings ``id``."""
    value = raw.get(FIELD_USER_ID, raw.get(FIELD_ID, 0))
    return int(value or 0)


def _auth_labels(raw: dict[str, Any]) -> tuple[str, ...]:
    labels = raw.get(FIELD_AUTH_LABELS) or ()
    if isinstance(labels, str):
        return (labels,)
    return tuple(str(label) for label in labels)


@dataclass(frozen=True)
class Organization:
    """A Grafana organization as returned by ``/api/user/orgs``."""

    id: int
    name: str
    role: str = ""

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Organization:
        return cls(
            id=int(raw.get(FIELD_ORG_ID, raw.get(FIELD_ID, 0)) or 0),
            name=raw.get(FIELD_NAME, ""),
            role=raw.get(FIELD_ROLE, ""),
        )


@dataclass(frozen=True)
class User:
    """A Grafana user from either the global or the per-organization listing."""

    id: int
    login: str
    name: str = ""
    email: str = ""
    avatar_url: str = ""
    is_disabled: bool = False
    last_seen_at: str = ""
    last_seen_at_age: str = ""
    auth_labels: tuple[str, ...] = ()
    is_externally_synced: bool = False

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> User:
        return cls(
            id=_user_id(raw),
            login=raw.get(FIELD_LOGIN, ""),
            name=raw.get(FIELD_NAME, ""),
            email=raw.get(FIELD_EMAIL, ""),
            avatar_url=raw.get(FIELD_AVATAR_URL, ""),
            is_disabled=bool(raw.get(FIELD_IS_DISABLED, False)),
            last_seen_at=raw.get(FIELD_LAST_SEEN_AT, ""),
            last_seen_at_age=raw.get(FIELD_LAST_SEEN_AT_AGE, ""),
            auth_labels=_auth_labels(raw),
            is_externally_synced=bool(raw.get(FIELD_IS_EXTERNALLY_SYNCED, False)),
        )


@dataclass(frozen=True)
class OrgMembership:
    """A user's membership in one organization, with the raw role string.

    Returned by the unpaginated ``/api/orgs/{org_id}/users`` endpoint.
    """

    user_id: int
    org_id: int
    login: str
    role: str
    name: str = ""
    email: str = ""
    avatar_url: str = ""
    is_disabled: bool = False
    last_seen_at: str = ""
    auth_labels: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> OrgMembership:
        return cls(
            user_id=_user_id(raw),
            org_id=int(raw.get(FIELD_ORG_ID, 0) or 0),
            login=raw.get(FIELD_LOGIN, ""),
            role=raw.get(FIELD_ROLE, ""),
            name=raw.get(FIELD_NAME, ""),
            email=raw.get(FIELD_EMAIL, ""),
            avatar_url=raw.get(FIELD_AVATAR_URL, ""),
            is_disabled=bool(raw.get(FIELD_IS_DISABLED, False)),
            last_seen_at=raw.get(FIELD_LAST_SEEN_AT, ""),
            auth_labels=_auth_labels(raw),
        )

    def to_user(self) -> User:
        """Drop the membership-specific fields and return the plain user record."""
        return User(
            id=self.user_id,
            login=self.login,
            name=self.name,
            email=self.email,
            avatar_url=self.avatar_url,
            is_disabled=self.is_disabled,
            last_seen_at=self.last_seen_at,
            auth_labels=self.auth_labels,
        )
