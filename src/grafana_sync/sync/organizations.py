"""Organization syncer — lists organizations, their role entitlements and grants."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from grafana_sync.grafana.client import GrafanaApiError
from grafana_sync.sync.base import DEFAULT_PAGE_SIZE
from grafana_sync.sync.errors import ResourceMappingError, ResourceSyncError
from grafana_sync.sync.models import Entitlement, Grant, Resource, ResourceKind, title_case
from grafana_sync.sync.pagination import advance_cursor, next_page_number, open_page, page_token
from grafana_sync.sync.roles import GRANTABLE_ROLES, Role, parse_role
from grafana_sync.sync.users import user_resource

if TYPE_CHECKING:
    from grafana_sync.grafana.client import GrafanaClient
    from grafana_sync.grafana.models import Organization

logger = logging.getLogger(__name__)


def organization_resource(org: Organization) -> Resource:
    """Project a Grafana organization into an Organization resource.

    Raises:
        ResourceMappingError: If the record has no usable id.
    """
    external_id = str(org.id) if org.id else ""
    try:
        return Resource(
            kind=ResourceKind.ORGANIZATION,
            external_id=external_id,
            display_name=title_case(org.name),
        )
    except ValueError as exc:
        raise ResourceMappingError(ResourceKind.ORGANIZATION, org.name, str(exc)) from exc


def role_entitlement(resource: Resource, role: Role) -> Entitlement:
    """Build the entitlement for holding ``role`` in an organization."""
    return Entitlement(
        resource=resource,
        role=role,
        display_name=f"{resource.display_name} {role}",
        description=f"{role} role in {resource.display_name} Grafana organization",
        grantable_to=(ResourceKind.USER,),
    )


class OrganizationSyncer:
    """Syncs Grafana organizations and the Viewer/Editor/Admin roles within them."""

    def __init__(
        self,
        client: GrafanaClient,
        page_size: int = DEFAULT_PAGE_SIZE,
        allowed_orgs: frozenset[str] = frozenset(),
    ) -> None:
        """Initialise the organization syncer.

        Args:
            client: Authenticated GrafanaClient instance.
            page_size: Organizations requested per page.
            allowed_orgs: Organization names or ids to keep. Empty keeps all.
        """
        self._client = client
        self._page_size = page_size
        self._allowed_orgs = allowed_orgs

    def resource_type(self) -> ResourceKind:
        return ResourceKind.ORGANIZATION

    def _is_allowed(self, org: Organization) -> bool:
        if not self._allowed_orgs:
            return True
        return org.name in self._allowed_orgs or str(org.id) in self._allowed_orgs

    def list_resources(
        self, cursor: str = "", parent_id: str | None = None
    ) -> tuple[list[Resource], str]:
        """Fetch one page of organizations.

        The allow-list is applied after the fetch. Whether another page is
        requested depends on the unfiltered count, so a page whose
        organizations are all filtered out still advances the cursor.

        Args:
            cursor: Cursor from the previous call, or ``""`` for the first page.
            parent_id: Unused; organizations are top-level.

        Returns:
            A tuple of (resources, next_cursor).
        """
        bag, page = open_page(cursor, ResourceKind.ORGANIZATION)
        try:
            orgs = self._client.list_organizations(page, self._page_size)
        except (GrafanaApiError, OSError) as exc:
            raise ResourceSyncError("list", ResourceKind.ORGANIZATION, str(exc)) from exc

        next_page = next_page_number(len(orgs), page, self._page_size)
        next_cursor = advance_cursor(bag, page_token(next_page))

        resources: list[Resource] = []
        for org in orgs:
            if not self._is_allowed(org):
                logger.debug(
                    "[list_resources] skipping organization not in allow-list; org:%s", org.name
                )
                continue
            resources.append(organization_resource(org))

        logger.info(
            "[list_resources] fetched organizations; page:%d;fetched:%d;kept:%d;next_page:%d",
            page,
            len(orgs),
            len(resources),
            next_page,
        )
        return resources, next_cursor

    def entitlements(self, resource: Resource) -> list[Entitlement]:
        """Return one entitlement per grantable role, regardless of membership."""
        return [role_entitlement(resource, role) for role in GRANTABLE_ROLES]

    def grants(self, resource: Resource, cursor: str = "") -> tuple[list[Grant], str]:
        """Return a grant for every member holding a recognised role.

        Grafana returns the whole membership in one unpaginated call, so the
        returned cursor is always ``""``. Members with roles outside
        Viewer/Editor/Admin are skipped.

        Args:
            resource: Organization resource to list grants for.
            cursor: Ignored; accepted for interface symmetry.

        Returns:
            A tuple of (grants, "").
        """
        try:
            memberships = self._client.list_org_members(resource.external_id)
        except (GrafanaApiError, OSError) as exc:
            raise ResourceSyncError(
                "grants", ResourceKind.ORGANIZATION, f"org {resource.external_id}: {exc}"
            ) from exc

        grants: list[Grant] = []
        for membership in memberships:
            role = parse_role(membership.role)
            if role is Role.UNKNOWN:
                logger.debug(
                    "[grants] dropping membership with unrecognised role; org_id:%s;login:%s;role:%s",
                    resource.external_id,
                    membership.login,
                    membership.role,
                )
                continue
            principal = user_resource(membership.to_user(), parent_id=resource.external_id)
            grants.append(
                Grant(
                    resource=resource,
                    entitlement=role_entitlement(resource, role),
                    principal=principal,
                )
            )

        logger.info(
            "[grants] built grants; org_id:%s;members:%d;grants:%d",
            resource.external_id,
            len(memberships),
            len(grants),
        )
        return grants, ""
