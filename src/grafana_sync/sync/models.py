"""Normalized identity-graph models: resources, entitlements and grants."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from grafana_sync.sync.roles import Role


class ResourceKind(StrEnum):
    """Kinds of resource the connector emits."""

    ORGANIZATION = "org"
    USER = "user"


class UserStatus(StrEnum):
    ENABLED = "enabled"
    DISABLED = "disabled"


# Words are runs of letters and digits, optionally joined by apostrophes.
_WORD = re.compile(r"[^\W_]+(?:['’][^\W_]+)*")


def title_case(value: str) -> str:
    """Title-case a raw Grafana name for display.

    Only the first letter of each word is upper-cased, so "o'neil" becomes
    "O'neil" rather than "O'Neil".
    """
    return _WORD.sub(lambda match: match.group(0).capitalize(), value)


@dataclass(frozen=True)
class Resource:
    """A node in the identity graph.

    Attributes:
        kind: Resource kind (organization or user).
        external_id: Identifier assigned by Grafana, unique within ``kind``.
        display_name: Human-readable name derived from the raw record.
        profile: Scalar attributes copied from the raw record.
        parent_id: External id of the owning organization, when scoped to one.
    """

    kind: ResourceKind
    external_id: str
    display_name: str
    profile: dict[str, Any] = field(default_factory=dict, hash=False)
    parent_id: str | None = None

    def __post_init__(self) -> None:
        if not self.external_id:
            raise ValueError(f"{self.kind} resource requires a non-empty external_id")

    @property
    def id(self) -> str:
        return f"{self.kind}:{self.external_id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": str(self.kind),
            "external_id": self.external_id,
            "display_name": self.display_name,
            "profile": dict(self.profile),
            "parent_id": self.parent_id,
        }


@dataclass(frozen=True)
class Entitlement:
    """A role on one organization that can be granted to users."""

    resource: Resource
    role: Role
    display_name: str
    description: str
    grantable_to: tuple[ResourceKind, ...] = (ResourceKind.USER,)

    @property
    def id(self) -> str:
        return f"{self.resource.id}:{self.role}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "resource_id": self.resource.id,
            "role": str(self.role),
            "display_name": self.display_name,
            "description": self.description,
            "grantable_to": [str(kind) for kind in self.grantable_to],
        }


@dataclass(frozen=True)
class Grant:
    """Assertion that ``principal`` holds ``entitlement`` on ``resource``."""

    resource: Resource
    entitlement: Entitlement
    principal: Resource

    @property
    def id(self) -> str:
        return f"{self.entitlement.id}:{self.principal.id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "resource_id": self.resource.id,
            "entitlement_id": self.entitlement.id,
            "principal_id": self.principal.id,
        }
