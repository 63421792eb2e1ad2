"""Shared surface implemented by every resource syncer."""

from __future__ import annotations

from typing import Protocol

from grafana_sync.config import DEFAULT_PAGE_SIZE
from grafana_sync.sync.models import Entitlement, Grant, Resource, ResourceKind

__all__ = ["DEFAULT_PAGE_SIZE", "ResourceSyncer"]


class ResourceSyncer(Protocol):
    """Lists one kind of resource and its entitlements and grants.

    Cursors passed in and returned are opaque strings; ``""`` on input
    means the first page and on output means there is nothing left.
    """

    def resource_type(self) -> ResourceKind: ...

    def list_resources(
        self, cursor: str = "", parent_id: str | None = None
    ) -> tuple[list[Resource], str]: ...

    def entitlements(self, resource: Resource) -> list[Entitlement]: ...

    def grants(self, resource: Resource, cursor: str = "") -> tuple[list[Grant], str]: ...
