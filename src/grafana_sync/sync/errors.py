"""Exceptions raised by the resource syncers."""

from __future__ import annotations


class ResourceSyncError(Exception):
    """Raised when a sync operation fails talking to Grafana.

    The underlying transport or API error is chained as ``__cause__``.
    """

    def __init__(self, operation: str, resource_type: str, detail: str = "") -> None:
        message = f"grafana-sync: {operation} {resource_type} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation
        self.resource_type = resource_type


class ResourceMappingError(Exception):
    """Raised when a raw Grafana record cannot be turned into a Resource."""

    def __init__(self, resource_type: str, record_id: object, reason: str) -> None:
        super().__init__(
            f"grafana-sync: failed to create {resource_type} resource for record {record_id}: {reason}"
        )
        self.resource_type = resource_type
        self.record_id = record_id
