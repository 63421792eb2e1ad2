"""Unit tests for orchestration/snapshot.py — SnapshotStore behaviour."""

import json
from unittest.mock import MagicMock, patch

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError

from grafana_sync.orchestration.runner import SyncSnapshot
from grafana_sync.orchestration.snapshot import SnapshotStore

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_store() -> tuple[SnapshotStore, MagicMock, MagicMock]:
    """Return (store, mock_container_client, mock_blob_client)."""
    mock_blob_service = MagicMock()
    mock_container = MagicMock()
    mock_blob = MagicMock()
    mock_blob_service.get_container_client.return_value = mock_container
    mock_container.get_blob_client.return_value = mock_blob

    with patch(
        "grafana_sync.orchestration.snapshot.BlobServiceClient.from_connection_string",
        return_value=mock_blob_service,
    ):
        store = SnapshotStore(
            storage_connection_string="DefaultEndpointsProtocol=https;...",
            container="grafana-sync-state",
            blob="snapshots/latest.json",
        )

    return store, mock_container, mock_blob


# ---------------------------------------------------------------------------
# save tests
# ---------------------------------------------------------------------------


class TestSave:
    def test_uploads_snapshot_json(self) -> None:
        store, mock_container, mock_blob = _make_store()

        store.save(SyncSnapshot(synced_at="2026-01-01T00:00:00+00:00"))

        mock_container.get_blob_client.assert_called_with("snapshots/latest.json")
        data = mock_blob.upload_blob.call_args[0][0]
        assert json.loads(data)["synced_at"] == "2026-01-01T00:00:00+00:00"
        assert mock_blob.upload_blob.call_args.kwargs["overwrite"] is True

    def test_creates_container_if_not_exists(self) -> None:
        store, mock_container, _ = _make_store()

        store.save(SyncSnapshot())

        mock_container.create_container.assert_called_once()

    def test_continues_if_container_already_exists(self) -> None:
        store, mock_container, mock_blob = _make_store()
        mock_container.create_container.side_effect = ResourceExistsError("exists")

        store.save(SyncSnapshot())

        mock_blob.upload_blob.assert_called_once()


# ---------------------------------------------------------------------------
# load tests
# ---------------------------------------------------------------------------


class TestLoad:
    def test_returns_none_when_blob_not_found(self) -> None:
        store, _, mock_blob = _make_store()
        mock_blob.download_blob.side_effect = ResourceNotFoundError("not found")

        assert store.load() is None

    def test_returns_decoded_snapshot(self) -> None:
        store, _, mock_blob = _make_store()
        mock_blob.download_blob.return_value.readall.return_value = json.dumps(
            {"synced_at": "x", "resources": []}
        ).encode()

        assert store.load() == {"synced_at": "x", "resources": []}
