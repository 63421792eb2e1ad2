"""Timer trigger blueprint — scheduled entry point for the Grafana sync."""

import logging

import azure.functions as func

from grafana_sync.config import load_config
from grafana_sync.orchestration.runner import sync_runner_from_config
from grafana_sync.orchestration.snapshot import snapshot_store_from_config

logger = logging.getLogger(__name__)

bp = func.Blueprint()


@bp.timer_trigger(
    schedule="0 0 * * * *",
    arg_name="timer",
    run_on_startup=False,
)
def timer_trigger(timer: func.TimerRequest) -> None:
    """Scheduled trigger that syncs Grafana into a stored snapshot.

    Runs hourly. Lists every organization, its role grants and its users,
    then replaces the stored snapshot.
    """
    logger.info("Timer trigger fired")

    try:
        if timer.past_due:
            logger.warning("Timer trigger is past due")

        config = load_config()
        snapshot = sync_runner_from_config(config).run()
        snapshot_store_from_config(config).save(snapshot)
        logger.info(
            "Sync complete: %d resource(s), %d grant(s)",
            len(snapshot.resources),
            len(snapshot.grants),
        )

    except Exception:
        logger.exception("Timer trigger failed")
        raise
