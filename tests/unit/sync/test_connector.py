"""Unit tests for sync/connector.py — GrafanaConnector wiring and validation."""

from unittest.mock import MagicMock, patch

import pytest

from grafana_sync.config import AppConfig
from grafana_sync.grafana.client import GrafanaApiError
from grafana_sync.sync.connector import GrafanaConnector, grafana_connector_from_config
from grafana_sync.sync.errors import ResourceSyncError
from grafana_sync.sync.models import ResourceKind


def _make_connector() -> tuple[GrafanaConnector, MagicMock]:
    mock_client = MagicMock()
    return GrafanaConnector(mock_client, page_size=10), mock_client


class TestGrafanaConnector:
    def test_resource_syncers_cover_orgs_and_users(self) -> None:
        connector, _ = _make_connector()

        kinds = [s.resource_type() for s in connector.resource_syncers()]

        assert kinds == [ResourceKind.ORGANIZATION, ResourceKind.USER]

    def test_metadata(self) -> None:
        connector, _ = _make_connector()
        assert connector.metadata().display_name == "Grafana"

    def test_validate_lists_first_page_of_organizations(self) -> None:
        connector, mock_client = _make_connector()
        mock_client.list_organizations.return_value = []

        connector.validate()

        mock_client.get_current_user.assert_called_once_with()
        mock_client.list_organizations.assert_called_once_with(1, 10)

    def test_validate_wraps_api_errors(self) -> None:
        connector, mock_client = _make_connector()
        mock_client.list_organizations.side_effect = GrafanaApiError(401, "Invalid API key")

        with pytest.raises(ResourceSyncError) as exc_info:
            connector.validate()

        assert exc_info.value.operation == "validate"

    def test_validate_stops_when_current_user_is_rejected(self) -> None:
        connector, mock_client = _make_connector()
        mock_client.get_current_user.side_effect = GrafanaApiError(401, "Invalid API key")

        with pytest.raises(ResourceSyncError) as exc_info:
            connector.validate()

        assert exc_info.value.operation == "validate"
        assert exc_info.value.resource_type == "user"
        assert isinstance(exc_info.value.__cause__, GrafanaApiError)
        mock_client.list_organizations.assert_not_called()


class TestGrafanaConnectorFromConfig:
    def test_wires_page_size_and_allow_list(self) -> None:
        config = AppConfig(
            username="admin",
            storage_connection_string="conn",
            access_token="glsa_token",
            orgs=frozenset({"acme"}),
            page_size=20,
        )

        with patch("grafana_sync.sync.connector.grafana_client_from_config") as mock_factory:
            connector = grafana_connector_from_config(config)

        mock_factory.assert_called_once_with(config)
        assert connector.organizations._page_size == 20
        assert connector.organizations._allowed_orgs == frozenset({"acme"})
        assert connector.users._page_size == 20
