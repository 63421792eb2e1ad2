"""Grafana connector — wires the resource syncers to a configured client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from grafana_sync.grafana.client import GrafanaApiError, GrafanaClient, grafana_client_from_config
from grafana_sync.sync.errors import ResourceSyncError
from grafana_sync.sync.models import ResourceKind
from grafana_sync.sync.organizations import OrganizationSyncer
from grafana_sync.sync.pagination import FIRST_PAGE
from grafana_sync.sync.users import UserSyncer

if TYPE_CHECKING:
    from grafana_sync.config import AppConfig
    from grafana_sync.sync.base import ResourceSyncer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectorMetadata:
    display_name: str
    description: str


class GrafanaConnector:
    """Entry point for syncing a Grafana instance."""

    def __init__(
        self,
        client: GrafanaClient,
        page_size: int,
        allowed_orgs: frozenset[str] = frozenset(),
    ) -> None:
        self._client = client
        self._page_size = page_size
        self._organizations = OrganizationSyncer(client, page_size, allowed_orgs)
        self._users = UserSyncer(client, page_size)

    @property
    def organizations(self) -> OrganizationSyncer:
        return self._organizations

    @property
    def users(self) -> UserSyncer:
        return self._users

    def resource_syncers(self) -> list[ResourceSyncer]:
        return [self._organizations, self._users]

    def metadata(self) -> ConnectorMetadata:
        return ConnectorMetadata(
            display_name="Grafana",
            description="Connector syncing Grafana organizations, users and organization roles",
        )

    def validate(self) -> None:
        """Check the credentials and that organizations can be listed with them.

        Fetches the authenticated user, then the first page of organizations.

        Raises:
            ResourceSyncError: If Grafana rejects either request or cannot be reached.
        """
        try:
            current_user = self._client.get_current_user()
        except (GrafanaApiError, OSError) as exc:
            logger.error("[validate] failed to fetch current user; error:%s", exc)
            raise ResourceSyncError("validate", ResourceKind.USER, str(exc)) from exc

        try:
            self._client.list_organizations(FIRST_PAGE, self._page_size)
        except (GrafanaApiError, OSError) as exc:
            logger.error("[validate] failed to list organizations; error:%s", exc)
            raise ResourceSyncError("validate", ResourceKind.ORGANIZATION, str(exc)) from exc
        logger.info("[validate] credentials accepted; login:%s", current_user.login)


def grafana_connector_from_config(config: AppConfig) -> GrafanaConnector:
    """Construct a GrafanaConnector from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured GrafanaConnector instance.
    """
    return GrafanaConnector(
        client=grafana_client_from_config(config),
        page_size=config.page_size,
        allowed_orgs=config.orgs,
    )
