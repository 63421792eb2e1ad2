"""Organization roles and the filter that maps raw role strings onto them."""

from enum import StrEnum


class Role(StrEnum):
    """Basic organization roles Grafana assigns to members."""

    VIEWER = "Viewer"
    EDITOR = "Editor"
    ADMIN = "Admin"
    UNKNOWN = "Unknown"


# Roles exposed as entitlements, in display order.
GRANTABLE_ROLES: tuple[Role, ...] = (Role.VIEWER, Role.EDITOR, Role.ADMIN)

_ROLES_BY_KEY: dict[str, Role] = {role.value.casefold(): role for role in GRANTABLE_ROLES}


def parse_role(raw: str | None) -> Role:
    """Map a raw Grafana role string onto a canonical Role.

    Matching ignores case and surrounding whitespace. Anything else,
    including Grafana's "None" basic role and custom roles, is UNKNOWN.
    """
    if not raw:
        return Role.UNKNOWN
    return _ROLES_BY_KEY.get(raw.strip().casefold(), Role.UNKNOWN)
