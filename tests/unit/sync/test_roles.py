"""Unit tests for sync/roles.py — role filter."""

import pytest

from grafana_sync.sync.roles import GRANTABLE_ROLES, Role, parse_role


class TestParseRole:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Viewer", Role.VIEWER),
            ("EDITOR", Role.EDITOR),
            ("admin", Role.ADMIN),
            ("  Admin ", Role.ADMIN),
        ],
    )
    def test_case_variants_map_to_canonical_role(self, raw: str, expected: Role) -> None:
        assert parse_role(raw) is expected

    @pytest.mark.parametrize("raw", ["superadmin", "None", "", None, "Unknown"])
    def test_unrecognised_roles_are_unknown(self, raw: str | None) -> None:
        assert parse_role(raw) is Role.UNKNOWN

    def test_grantable_roles_exclude_unknown(self) -> None:
        assert GRANTABLE_ROLES == (Role.VIEWER, Role.EDITOR, Role.ADMIN)
