"""Webhook subscription management and delivery log endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.webhook import WebhookDelivery, WebhookSubscription
from app.schemas.webhook import (
    WebhookDeliveryRead,
    WebhookSubscriptionCreate,
    WebhookSubscriptionRead,
    WebhookSubscriptionUpdate,
)
from app.services import activities as activities_service
from app.services import webhooks as webhooks_service
from app.utils.errors import error_response

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error_response("WEBHOOK_NOT_FOUND", "Webhook não encontrado"),
    )


@router.get("", response_model=list[WebhookSubscriptionRead])
def list_subscriptions(db: Session = Depends(get_db)) -> list[WebhookSubscription]:
    return webhooks_service.list_subscriptions(db)


@router.get("/entregas", response_model=list[WebhookDeliveryRead])
def list_deliveries(
    evento: str | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> list[WebhookDelivery]:
    """Inbound notification history, most recent first."""

    return webhooks_service.list_deliveries(db, evento=evento, limit=limit)


@router.get("/{subscription_id}", response_model=WebhookSubscriptionRead)
def get_subscription(subscription_id: int, db: Session = Depends(get_db)) -> WebhookSubscription:
    subscription = webhooks_service.get_subscription(db, subscription_id)
    if subscription is None:
        raise _not_found()
    return subscription


@router.post("", response_model=WebhookSubscriptionRead, status_code=status.HTTP_201_CREATED)
def create_subscription(
    payload: WebhookSubscriptionCreate, db: Session = Depends(get_db)
) -> WebhookSubscription:
    subscription = webhooks_service.create_subscription(db, payload.model_dump())
    activities_service.record_activity(
        db,
        tipo="webhook",
        descricao=f"Novo webhook criado - {subscription.evento}",
        icone="exchange-line",
        cor="secondary",
    )
    db.commit()
    db.refresh(subscription)
    return subscription


@router.put("/{subscription_id}", response_model=WebhookSubscriptionRead)
def update_subscription(
    subscription_id: int,
    payload: WebhookSubscriptionUpdate,
    db: Session = Depends(get_db),
) -> WebhookSubscription:
    subscription = webhooks_service.update_subscription(
        db, subscription_id, payload.model_dump(exclude_unset=True)
    )
    if subscription is None:
        raise _not_found()
    activities_service.record_activity(
        db,
        tipo="webhook",
        descricao=f"Webhook atualizado - {subscription.evento}",
        icone="edit-line",
        cor="primary",
    )
    db.commit()
    db.refresh(subscription)
    return subscription


@router.delete("/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subscription(subscription_id: int, db: Session = Depends(get_db)) -> Response:
    subscription = webhooks_service.get_subscription(db, subscription_id)
    if subscription is None:
        raise _not_found()
    evento = subscription.evento
    webhooks_service.delete_subscription(db, subscription_id)
    activities_service.record_activity(
        db,
        tipo="webhook",
        descricao=f"Webhook removido - {evento}",
        icone="delete-bin-line",
        cor="danger",
    )
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
