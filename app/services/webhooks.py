"""Webhook subscriptions (dashboard configuration) and delivery log."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import exists, func, select, update
from sqlalchemy.orm import Session

from app.models.transaction import Transaction
from app.models.webhook import (
    RESOURCE_ID_MAX_LENGTH,
    URL_MAX_LENGTH,
    WebhookDelivery,
    WebhookSubscription,
)
from app.utils.time import utcnow

logger = logging.getLogger(__name__)

SUBSCRIPTION_EVENT_PREFIX = "mercadopago."


# --- Delivery log ---------------------------------------------------------


def record_delivery(
    db: Session,
    *,
    evento: str,
    recurso_id: str | None,
    url: str,
    sucesso: bool,
    dados: dict[str, Any] | None,
) -> WebhookDelivery:
    """Append one delivery log entry. Entries are never updated afterwards.

    ``url`` and ``recurso_id`` are cut to their column lengths.
    """

    delivery = WebhookDelivery(
        evento=evento,
        recurso_id=recurso_id[:RESOURCE_ID_MAX_LENGTH] if recurso_id else recurso_id,
        url=url[:URL_MAX_LENGTH],
        sucesso=sucesso,
        ultimo_status=200 if sucesso else 500,
        ultima_execucao=utcnow(),
        dados=dados,
    )
    db.add(delivery)
    db.flush()
    return delivery


def list_deliveries(db: Session, *, evento: str | None = None, limit: int | None = None) -> list[WebhookDelivery]:
    stmt = select(WebhookDelivery)
    if evento:
        stmt = stmt.where(WebhookDelivery.evento == evento)
    stmt = stmt.order_by(WebhookDelivery.ultima_execucao.desc(), WebhookDelivery.id.desc())
    if limit:
        stmt = stmt.limit(limit)
    return list(db.scalars(stmt).all())


def list_replayable_failures(
    db: Session,
    *,
    evento: str,
    since: datetime,
    max_attempts: int,
) -> list[str]:
    """Return resource ids whose deliveries failed and were never reconciled.

    Only failures newer than ``since`` count, and resources that already
    failed ``max_attempts`` times in that window are given up on.
    """

    attempts = func.count(WebhookDelivery.id)
    stmt = (
        select(WebhookDelivery.recurso_id)
        .where(
            WebhookDelivery.evento == evento,
            WebhookDelivery.sucesso.is_(False),
            WebhookDelivery.recurso_id.is_not(None),
            WebhookDelivery.ultima_execucao >= since,
            ~exists().where(Transaction.referencia == WebhookDelivery.recurso_id),
        )
        .group_by(WebhookDelivery.recurso_id)
        .having(attempts < max_attempts)
        .order_by(WebhookDelivery.recurso_id)
    )
    return [resource_id for resource_id in db.scalars(stmt).all()]


# --- Subscriptions --------------------------------------------------------


def create_subscription(db: Session, fields: dict[str, Any]) -> WebhookSubscription:
    subscription = WebhookSubscription(**fields)
    db.add(subscription)
    db.flush()
    return subscription


def get_subscription(db: Session, subscription_id: int) -> WebhookSubscription | None:
    return db.get(WebhookSubscription, subscription_id)


def list_subscriptions(db: Session) -> list[WebhookSubscription]:
    stmt = select(WebhookSubscription).order_by(WebhookSubscription.id)
    return list(db.scalars(stmt).all())


def update_subscription(
    db: Session, subscription_id: int, fields: dict[str, Any]
) -> WebhookSubscription | None:
    subscription = get_subscription(db, subscription_id)
    if subscription is None:
        return None
    for name, value in fields.items():
        setattr(subscription, name, value)
    db.flush()
    return subscription


def delete_subscription(db: Session, subscription_id: int) -> bool:
    subscription = get_subscription(db, subscription_id)
    if subscription is None:
        return False
    db.delete(subscription)
    db.flush()
    return True


def touch_subscriptions(db: Session, *, topic: str, status_code: int) -> int:
    """Stamp active subscriptions for ``mercadopago.<topic>`` with the last outcome."""

    stmt = (
        update(WebhookSubscription)
        .where(
            WebhookSubscription.evento == f"{SUBSCRIPTION_EVENT_PREFIX}{topic}",
            WebhookSubscription.ativo.is_(True),
        )
        .values(ultima_execucao=utcnow(), ultimo_status=status_code)
        .execution_options(synchronize_session="fetch")
    )
    result = db.execute(stmt)
    return result.rowcount or 0


__all__ = [
    "record_delivery",
    "list_deliveries",
    "list_replayable_failures",
    "create_subscription",
    "get_subscription",
    "list_subscriptions",
    "update_subscription",
    "delete_subscription",
    "touch_subscriptions",
]
