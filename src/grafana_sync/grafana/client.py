"""Grafana HTTP API client with bearer-token or basic authentication."""

from __future__ import annotations

import base64
import json
import logging
from typing import TYPE_CHECKING, Any
from urllib import request as urllib_request
from urllib.error import HTTPError
from urllib.parse import urlencode

from grafana_sync.grafana.models import Organization, OrgMembership, User

if TYPE_CHECKING:
    from grafana_sync.config import AppConfig

logger = logging.getLogger(__name__)

CURRENT_USER_PATH = "/api/user"
USER_ORGS_PATH = "/api/user/orgs"
USERS_PATH = "/api/users"
USERS_IN_ORG_PATH = "/api/orgs/{org_id}/users"

PARAM_PER_PAGE = "perpage"
PARAM_PAGE = "page"


class GrafanaAuthError(Exception):
    """Raised when the client has no usable credentials."""


class GrafanaApiError(Exception):
    """Raised when the Grafana API returns a non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Grafana API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


def pagination_params(page: int, page_size: int) -> dict[str, int]:
    """Build the ``perpage``/``page`` query parameters Grafana understands.

    Zero values are omitted so Grafana falls back to its own defaults.
    """
    params: dict[str, int] = {}
    if page_size > 0:
        params[PARAM_PER_PAGE] = page_size
    if page > 0:
        params[PARAM_PAGE] = page
    return params


class GrafanaClient:
    """Authenticated client for the Grafana HTTP API."""

    def __init__(
        self,
        base_url: str,
        username: str = "",
        password: str = "",
        access_token: str = "",
        timeout: float = 30.0,
    ) -> None:
        """Initialise the client and resolve the Authorization header.

        Args:
            base_url: Grafana root URL (e.g. "http://localhost:3000").
            username: Grafana username, used with ``password`` for basic auth.
            password: Grafana password.
            access_token: Service account or personal access token. Takes
                precedence over basic auth when set.
            timeout: Socket timeout in seconds for every request.

        Raises:
            GrafanaAuthError: If neither a token nor a username/password pair is given.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._authorization = self._build_authorization(username, password, access_token)

    @staticmethod
    def _build_authorization(username: str, password: str, access_token: str) -> str:
        if access_token:
            return f"Bearer {access_token}"
        if username and password:
            encoded = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
            return f"Basic {encoded}"
        raise GrafanaAuthError("Grafana client requires an access token or username and password")

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Perform an authenticated GET request to the Grafana API.

        Args:
            path: URL path relative to the base URL (must start with '/').
            params: Optional query parameters.

        Returns:
            Parsed JSON response body.

        Raises:
            GrafanaApiError: If the API returns a non-2xx status code.
            urllib.error.URLError: If the server cannot be reached.
        """
        url = f"{self._base_url}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        req = urllib_request.Request(
            url,
            headers={
                "Authorization": self._authorization,
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            method="GET",
        )
        logger.debug("[get] requesting; path:%s", path)
        try:
            with urllib_request.urlopen(req, timeout=self._timeout) as resp:
                body = resp.read()
                return json.loads(body) if body else None
        except HTTPError as exc:
            raw = exc.read()
            try:
                detail = json.loads(raw).get("message", exc.reason)
            except Exception:
                detail = exc.reason
            raise GrafanaApiError(exc.code, detail) from exc

    def get_current_user(self) -> User:
        """Return the user the client is authenticated as."""
        return User.from_dict(self.get(CURRENT_USER_PATH) or {})

    def list_organizations(self, page: int, page_size: int) -> list[Organization]:
        """Fetch one page of the organizations visible to the current user."""
        response = self.get(USER_ORGS_PATH, pagination_params(page, page_size)) or []
        return [Organization.from_dict(raw) for raw in response]

    def list_users(self, page: int, page_size: int) -> list[User]:
        """Fetch one page of all users in the Grafana instance."""
        response = self.get(USERS_PATH, pagination_params(page, page_size)) or []
        return [User.from_dict(raw) for raw in response]

    def list_users_in_org(self, org_id: str, page: int, page_size: int) -> list[User]:
        """Fetch one page of the users belonging to one organization."""
        path = USERS_IN_ORG_PATH.format(org_id=org_id)
        response = self.get(path, pagination_params(page, page_size)) or []
        return [User.from_dict(raw) for raw in response]

    def list_org_members(self, org_id: str) -> list[OrgMembership]:
        """Fetch every membership of one organization.

        Grafana does not paginate this endpoint; one call returns the
        complete membership together with each member's role.
        """
        response = self.get(USERS_IN_ORG_PATH.format(org_id=org_id)) or []
        return [OrgMembership.from_dict(raw) for raw in response]


def grafana_client_from_config(config: AppConfig) -> GrafanaClient:
    """Construct a GrafanaClient from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured GrafanaClient instance.
    """
    return GrafanaClient(
        base_url=config.grafana_url,
        username=config.username,
        password=config.password,
        access_token=config.access_token,
        timeout=config.request_timeout,
    )
