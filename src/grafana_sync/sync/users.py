"""User syncer — lists Grafana users globally or within one organization."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from grafana_sync.grafana.client import GrafanaApiError
from grafana_sync.sync.base import DEFAULT_PAGE_SIZE
from grafana_sync.sync.errors import ResourceMappingError, ResourceSyncError
from grafana_sync.sync.models import (
    Entitlement,
    Grant,
    Resource,
    ResourceKind,
    UserStatus,
    title_case,
)
from grafana_sync.sync.pagination import advance_cursor, next_page_number, open_page, page_token

if TYPE_CHECKING:
    from grafana_sync.grafana.client import GrafanaClient
    from grafana_sync.grafana.models import User

logger = logging.getLogger(__name__)


def user_resource(user: User, parent_id: str | None = None) -> Resource:
    """Project a Grafana user into a User resource.

    Args:
        user: Raw user record.
        parent_id: External id of the organization the user was listed under.

    Raises:
        ResourceMappingError: If the record has no usable id.
    """
    status = UserStatus.DISABLED if user.is_disabled else UserStatus.ENABLED
    profile = {
        "full_name": user.name,
        "login": user.login,
        "user_id": user.id,
        "email": user.email,
        "status": str(status),
    }
    external_id = str(user.id) if user.id else ""
    try:
        return Resource(
            kind=ResourceKind.USER,
            external_id=external_id,
            display_name=title_case(user.name or user.login),
            profile=profile,
            parent_id=parent_id,
        )
    except ValueError as exc:
        raise ResourceMappingError(ResourceKind.USER, user.login or user.email, str(exc)) from exc


class UserSyncer:
    """Syncs Grafana users. Users are leaves: no entitlements, no grants."""

    def __init__(self, client: GrafanaClient, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._client = client
        self._page_size = page_size

    def resource_type(self) -> ResourceKind:
        return ResourceKind.USER

    def list_resources(
        self, cursor: str = "", parent_id: str | None = None
    ) -> tuple[list[Resource], str]:
        """Fetch one page of users.

        Args:
            cursor: Cursor from the previous call, or ``""`` for the first page.
            parent_id: Organization id to list members of; all users when None.

        Returns:
            A tuple of (resources, next_cursor); ``next_cursor`` is ``""``
            once the last page has been fetched.
        """
        bag, page = open_page(cursor, ResourceKind.USER, parent_id or "")
        try:
            if parent_id:
                users = self._client.list_users_in_org(parent_id, page, self._page_size)
            else:
                users = self._client.list_users(page, self._page_size)
        except (GrafanaApiError, OSError) as exc:
            raise ResourceSyncError("list", ResourceKind.USER, str(exc)) from exc

        next_page = next_page_number(len(users), page, self._page_size)
        next_cursor = advance_cursor(bag, page_token(next_page))
        logger.info(
            "[list_resources] fetched users; org_id:%s;page:%d;count:%d;next_page:%d",
            parent_id or "-",
            page,
            len(users),
            next_page,
        )
        return [user_resource(user, parent_id) for user in users], next_cursor

    def entitlements(self, resource: Resource) -> list[Entitlement]:
        return []

    def grants(self, resource: Resource, cursor: str = "") -> tuple[list[Grant], str]:
        return [], ""
