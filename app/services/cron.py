"""Background jobs for webhook maintenance."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.core.runtime_state import record_replay_run
from app.db import session_scope
from app.services import webhooks as webhooks_service
from app.services.mercadopago import MercadoPagoClient
from app.services.reconciler import TOPIC_PAYMENT, reconcile_notification
from app.utils.time import hours_ago

logger = logging.getLogger(__name__)

REPLAY_SOURCE_URL = "scheduler:replay"


def _replay(db: Session, gateway: Any, settings: Settings) -> int:
    resource_ids = webhooks_service.list_replayable_failures(
        db,
        evento=TOPIC_PAYMENT,
        since=hours_ago(settings.WEBHOOK_REPLAY_WINDOW_HOURS),
        max_attempts=settings.WEBHOOK_REPLAY_MAX_ATTEMPTS,
    )
    replayed = 0
    for resource_id in resource_ids:
        outcome = reconcile_notification(
            db,
            gateway,
            topic=TOPIC_PAYMENT,
            resource_id=resource_id,
            source_url=REPLAY_SOURCE_URL,
        )
        if outcome.log_error:
            logger.error(
                "Failed to record webhook failure",
                extra={"resource_id": resource_id, "error": outcome.log_error},
            )
        if outcome.success:
            replayed += 1

    record_replay_run(len(resource_ids), replayed)
    if resource_ids:
        logger.info(
            "Failed webhook deliveries replayed",
            extra={"candidates": len(resource_ids), "reconciled": replayed},
        )
    return replayed


def replay_failed_deliveries_once(
    *,
    db_session: Session | None = None,
    gateway: Any | None = None,
) -> int:
    """Re-run reconciliation for payment notifications whose delivery failed.

    Returns the number of resources reconciled successfully. Running on more
    than one replica at once is harmless since transactions are upserted by
    ``referencia``.
    """

    settings = get_settings()
    client = gateway if gateway is not None else MercadoPagoClient(settings)
    try:
        if db_session is not None:
            return _replay(db_session, client, settings)
        with session_scope() as db:
            return _replay(db, client, settings)
    finally:
        if gateway is None:
            client.close()


__all__ = ["REPLAY_SOURCE_URL", "replay_failed_deliveries_once"]
