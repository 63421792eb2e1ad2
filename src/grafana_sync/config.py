"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field

DEFAULT_GRAFANA_URL = "http://localhost:3000"
DEFAULT_PAGE_SIZE = 50
DEFAULT_REQUEST_TIMEOUT = 30.0


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing. Exactly one of
    ``access_token`` and ``password`` must be set; ``__post_init__`` raises
    ValueError otherwise.
    """

    # Required: no defaults, fail at startup if missing
    username: str
    storage_connection_string: str

    # Credentials: exactly one of the two
    password: str = ""
    access_token: str = ""

    # Domain constants, overridable via env
    grafana_url: str = DEFAULT_GRAFANA_URL
    orgs: frozenset[str] = field(default_factory=frozenset)
    page_size: int = DEFAULT_PAGE_SIZE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    snapshot_container: str = "grafana-sync-state"
    snapshot_blob: str = "snapshots/latest.json"

    def __post_init__(self) -> None:
        if self.access_token and self.password:
            raise ValueError("access_token and password are mutually exclusive")
        if not self.access_token and not self.password:
            raise ValueError("one of access_token or password must be set")
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")


def parse_orgs(raw: str) -> frozenset[str]:
    """Split a comma-separated organization list into an immutable set.

    Blank entries and surrounding whitespace are ignored, so an empty or
    whitespace-only string yields an empty set (no filtering).
    """
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Required environment variables:
        GS_USERNAME: Grafana username used to connect to the Grafana API.
        AzureWebJobsStorage: Azure Storage account connection string.

    Credential environment variables (exactly one):
        GS_PASSWORD: Grafana password, used with GS_USERNAME for basic auth.
        GS_ACCESS_TOKEN: Grafana service account or personal access token.

    Optional environment variables (with defaults):
        GS_GRAFANA_URL: Base URL of the Grafana instance (default: http://localhost:3000).
        GS_ORGS: Comma-separated organization names or ids to limit syncing to.
        GS_PAGE_SIZE: Records requested per page (default: 50).
        GS_REQUEST_TIMEOUT: HTTP timeout in seconds (default: 30).
        GS_SNAPSHOT_CONTAINER: Blob container for sync snapshots.
        GS_SNAPSHOT_BLOB: Blob path for the latest sync snapshot.

    Returns:
        Configured AppConfig instance.
    """
    return AppConfig(
        username=os.environ["GS_USERNAME"],
        storage_connection_string=os.environ["AzureWebJobsStorage"],  # noqa: SIM112
        password=os.environ.get("GS_PASSWORD", ""),
        access_token=os.environ.get("GS_ACCESS_TOKEN", ""),
        grafana_url=os.environ.get("GS_GRAFANA_URL", DEFAULT_GRAFANA_URL),
        orgs=parse_orgs(os.environ.get("GS_ORGS", "")),
        page_size=int(os.environ.get("GS_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))),
        request_timeout=float(
            os.environ.get("GS_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
        ),
        snapshot_container=os.environ.get("GS_SNAPSHOT_CONTAINER", "grafana-sync-state"),
        snapshot_blob=os.environ.get("GS_SNAPSHOT_BLOB", "snapshots/latest.json"),
    )
