"""Unit tests for sync/users.py — UserSyncer behaviour."""

from unittest.mock import MagicMock

import pytest

from grafana_sync.grafana.client import GrafanaApiError
from grafana_sync.grafana.models import User
from grafana_sync.sync.errors import ResourceSyncError
from grafana_sync.sync.models import Resource, ResourceKind
from grafana_sync.sync.pagination import (
    CursorDecodeError,
    PageState,
    PaginationBag,
    current_page_number,
    decode_cursor,
    encode_cursor,
)
from grafana_sync.sync.users import UserSyncer, user_resource

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_syncer(page_size: int = 50) -> tuple[UserSyncer, MagicMock]:
    """Return (syncer, mock_grafana_client)."""
    mock_client = MagicMock()
    return UserSyncer(mock_client, page_size), mock_client


def _users(count: int) -> list[User]:
    return [
        User(id=i, login=f"user{i}", name=f"user {i}", email=f"user{i}@example.com")
        for i in range(1, count + 1)
    ]


# ---------------------------------------------------------------------------
# user_resource tests
# ---------------------------------------------------------------------------


class TestUserResource:
    def test_profile_and_status(self) -> None:
        user = User(
            id=7, login="alice", name="alice liddell", email="alice@example.com", is_disabled=True
        )

        resource = user_resource(user, parent_id="3")

        assert resource.kind is ResourceKind.USER
        assert resource.external_id == "7"
        assert resource.display_name == "Alice Liddell"
        assert resource.parent_id == "3"
        assert resource.profile == {
            "full_name": "alice liddell",
            "login": "alice",
            "user_id": 7,
            "email": "alice@example.com",
            "status": "disabled",
        }

    def test_enabled_user_without_name_falls_back_to_login(self) -> None:
        resource = user_resource(User(id=8, login="bob"))
        assert resource.display_name == "Bob"
        assert resource.profile["status"] == "enabled"
        assert resource.parent_id is None


# ---------------------------------------------------------------------------
# list_resources tests
# ---------------------------------------------------------------------------


class TestListResources:
    def test_global_listing_without_parent(self) -> None:
        syncer, mock_client = _make_syncer()
        mock_client.list_users.return_value = _users(3)

        resources, next_cursor = syncer.list_resources("")

        mock_client.list_users.assert_called_once_with(1, 50)
        mock_client.list_users_in_org.assert_not_called()
        assert len(resources) == 3
        assert next_cursor == ""

    def test_org_scoped_listing_sets_parent(self) -> None:
        syncer, mock_client = _make_syncer()
        mock_client.list_users_in_org.return_value = _users(2)

        resources, _ = syncer.list_resources("", parent_id="4")

        mock_client.list_users_in_org.assert_called_once_with("4", 1, 50)
        assert {r.parent_id for r in resources} == {"4"}

    def test_full_page_continues_with_parent_frame(self) -> None:
        syncer, mock_client = _make_syncer(page_size=50)
        mock_client.list_users_in_org.return_value = _users(50)

        _, next_cursor = syncer.list_resources("", parent_id="4")

        bag = decode_cursor(next_cursor, "user")
        assert bag.current == PageState(resource_type_id="user", resource_id="4", token="2")

    def test_resumes_from_cursor(self) -> None:
        syncer, mock_client = _make_syncer(page_size=50)
        mock_client.list_users.return_value = _users(49)
        cursor = encode_cursor(PaginationBag(current=PageState(resource_type_id="user", token="3")))

        _, next_cursor = syncer.list_resources(cursor)

        mock_client.list_users.assert_called_once_with(3, 50)
        assert next_cursor == ""

    def test_cursor_from_another_organization_is_rejected(self) -> None:
        syncer, mock_client = _make_syncer()
        cursor = encode_cursor(
            PaginationBag(current=PageState(resource_type_id="user", resource_id="7", token="3"))
        )

        with pytest.raises(CursorDecodeError, match="'7'"):
            syncer.list_resources(cursor, parent_id="4")

        mock_client.list_users_in_org.assert_not_called()

    def test_org_cursor_is_rejected_by_global_listing(self) -> None:
        syncer, mock_client = _make_syncer()
        cursor = encode_cursor(
            PaginationBag(current=PageState(resource_type_id="user", resource_id="7", token="3"))
        )

        with pytest.raises(CursorDecodeError):
            syncer.list_resources(cursor)

        mock_client.list_users.assert_not_called()

    def test_cursor_from_another_resource_type_is_rejected(self) -> None:
        syncer, mock_client = _make_syncer()
        cursor = encode_cursor(PaginationBag(current=PageState(resource_type_id="org", token="2")))

        with pytest.raises(CursorDecodeError):
            syncer.list_resources(cursor)

        mock_client.list_users.assert_not_called()

    def test_api_error_is_wrapped(self) -> None:
        syncer, mock_client = _make_syncer()
        mock_client.list_users_in_org.side_effect = GrafanaApiError(500, "boom")

        with pytest.raises(ResourceSyncError) as exc_info:
            syncer.list_resources("", parent_id="4")

        assert exc_info.value.resource_type == "user"

    def test_next_page_advances_by_one(self) -> None:
        syncer, mock_client = _make_syncer(page_size=2)
        mock_client.list_users.return_value = _users(2)
        cursor = encode_cursor(PaginationBag(current=PageState(resource_type_id="user", token="5")))

        _, next_cursor = syncer.list_resources(cursor)

        assert current_page_number(decode_cursor(next_cursor, "user")) == 6


# ---------------------------------------------------------------------------
# entitlements / grants tests
# ---------------------------------------------------------------------------


class TestLeafResource:
    def test_no_entitlements_or_grants(self) -> None:
        syncer, mock_client = _make_syncer()
        resource = Resource(kind=ResourceKind.USER, external_id="1", display_name="A")

        assert syncer.entitlements(resource) == []
        assert syncer.grants(resource) == ([], "")
        mock_client.assert_not_called()

    def test_resource_type(self) -> None:
        syncer, _ = _make_syncer()
        assert syncer.resource_type() is ResourceKind.USER
