"""Sync snapshot persistence in Azure Blob Storage."""

from __future__ import annotations

import contextlib
import json
import logging
from typing import TYPE_CHECKING, Any

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings

if TYPE_CHECKING:
    from grafana_sync.config import AppConfig
    from grafana_sync.orchestration.runner import SyncSnapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Stores the latest sync snapshot as a JSON blob.

    The snapshot is the artifact handed to the governance platform.
    Pagination cursors are never stored; every sync starts from the first page.
    """

    def __init__(self, storage_connection_string: str, container: str, blob: str) -> None:
        """Initialise the snapshot store.

        Args:
            storage_connection_string: Azure Storage connection string.
            container: Blob container name for snapshots.
            blob: Blob path of the latest snapshot.
        """
        self._blob_service = BlobServiceClient.from_connection_string(storage_connection_string)
        self._container = container
        self._blob = blob

    def save(self, snapshot: SyncSnapshot) -> None:
        """Upload the snapshot, creating the container if needed."""
        container_client = self._blob_service.get_container_client(self._container)
        with contextlib.suppress(ResourceExistsError):
            container_client.create_container()
            logger.info("[save] created blob container; container:%s", self._container)

        blob_client = container_client.get_blob_client(self._blob)
        blob_client.upload_blob(
            snapshot.to_json().encode("utf-8"),
            overwrite=True,
            content_settings=ContentSettings(content_type="application/json"),
        )
        logger.info(
            "[save] stored snapshot; blob:%s;resources:%d",
            self._blob,
            len(snapshot.resources),
        )

    def load(self) -> dict[str, Any] | None:
        """Read the last stored snapshot.

        Returns:
            The decoded snapshot, or None if no sync has been stored yet.
        """
        try:
            container_client = self._blob_service.get_container_client(self._container)
            blob_client = container_client.get_blob_client(self._blob)
            data = blob_client.download_blob().readall()
        except ResourceNotFoundError:
            logger.info("[load] no snapshot found in blob storage")
            return None
        return json.loads(data.decode("utf-8"))  # type: ignore[no-any-return]


def snapshot_store_from_config(config: AppConfig) -> SnapshotStore:
    """Construct a SnapshotStore from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured SnapshotStore instance.
    """
    return SnapshotStore(
        storage_connection_string=config.storage_connection_string,
        container=config.snapshot_container,
        blob=config.snapshot_blob,
    )
