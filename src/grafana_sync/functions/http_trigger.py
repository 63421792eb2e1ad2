"""HTTP trigger blueprint — health check, manual sync and snapshot endpoints."""

import json
import logging

import azure.functions as func

from grafana_sync import __version__
from grafana_sync.config import load_config
from grafana_sync.orchestration.runner import sync_runner_from_config
from grafana_sync.orchestration.snapshot import snapshot_store_from_config

logger = logging.getLogger(__name__)

bp = func.Blueprint()


def _error_response() -> func.HttpResponse:
    error_body = json.dumps({"status": "error", "message": "Internal server error"})
    return func.HttpResponse(error_body, status_code=500, mimetype="application/json")


@bp.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint. Returns service status and version."""
    logger.info("[health_check] health check requested")

    try:
        body = json.dumps({"status": "ok", "version": __version__})
        return func.HttpResponse(body, status_code=200, mimetype="application/json")

    except Exception:
        logger.error("[health_check] health check failed", exc_info=True)
        return _error_response()


@bp.route(route="sync", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def manual_sync(req: func.HttpRequest) -> func.HttpResponse:
    """Manual sync endpoint. Runs a full sync on demand.

    Requires a function key for authentication. Executes the same logic
    as the timer trigger and returns the snapshot counts.
    """
    logger.info("[manual_sync] manual sync requested")

    try:
        config = load_config()
        snapshot = sync_runner_from_config(config).run()
        snapshot_store_from_config(config).save(snapshot)
        logger.info(
            "[manual_sync] sync complete; resources:%d;grants:%d",
            len(snapshot.resources),
            len(snapshot.grants),
        )

        body = json.dumps(
            {
                "status": "ok",
                "synced_at": snapshot.synced_at,
                "resources": len(snapshot.resources),
                "entitlements": len(snapshot.entitlements),
                "grants": len(snapshot.grants),
            }
        )
        return func.HttpResponse(body, status_code=200, mimetype="application/json")

    except Exception:
        logger.error("[manual_sync] manual sync failed", exc_info=True)
        return _error_response()


@bp.route(route="snapshot", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
def latest_snapshot(req: func.HttpRequest) -> func.HttpResponse:
    """Return the last stored snapshot, or 404 if no sync has completed yet."""
    logger.info("[latest_snapshot] snapshot requested")

    try:
        config = load_config()
        snapshot = snapshot_store_from_config(config).load()
        if snapshot is None:
            body = json.dumps({"status": "not_found", "message": "No snapshot stored yet"})
            return func.HttpResponse(body, status_code=404, mimetype="application/json")
        return func.HttpResponse(json.dumps(snapshot), status_code=200, mimetype="application/json")

    except Exception:
        logger.error("[latest_snapshot] snapshot lookup failed", exc_info=True)
        return _error_response()
