"""MercadoPago endpoints: notifications, preferences and direct payments."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db import get_db
from app.models.transaction import Transaction
from app.schemas.mercadopago import PaymentCreate, PreferenceCreate
from app.schemas.transaction import TransactionRead
from app.services import activities as activities_service
from app.services import transactions as transactions_service
from app.services.mercadopago import GatewayError, MercadoPagoClient, get_gateway_client
from app.services.reconciler import derive_transaction, reconcile_notification
from app.utils.errors import error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mercadopago", tags=["mercadopago"])

INVALID_PARAMS_MESSAGE = "Parâmetros inválidos"


def _gateway_http_error(exc: GatewayError) -> HTTPException:
    details = {"status_code": exc.status_code} if exc.status_code else None
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=error_response("GATEWAY_ERROR", exc.message, details),
    )


def _source_url(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


@router.post("/webhook", status_code=status.HTTP_200_OK)
def mercadopago_webhook(
    request: Request,
    topic: str | None = Query(default=None),
    resource_id: str | None = Query(default=None, alias="id"),
    db: Session = Depends(get_db),
    gateway: MercadoPagoClient = Depends(get_gateway_client),
) -> dict[str, Any]:
    """Receive a gateway notification.

    Always answers 200 once topic and id are present so the gateway does not
    escalate retries; failures are recorded in the delivery log.
    """

    # Newer notifications use ``type`` and ``data.id``.
    topic = topic or request.query_params.get("type")
    resource_id = resource_id or request.query_params.get("data.id")
    if not topic or not resource_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": INVALID_PARAMS_MESSAGE,
                **error_response("WEBHOOK_PARAMS_INVALID", INVALID_PARAMS_MESSAGE),
            },
        )

    outcome = reconcile_notification(
        db,
        gateway,
        topic=topic,
        resource_id=resource_id,
        source_url=_source_url(request),
    )
    if outcome.log_error:
        logger.error(
            "Failed to record webhook failure",
            extra={"topic": topic, "resource_id": resource_id, "error": outcome.log_error},
        )
    if not outcome.success:
        return {"success": False, "error": outcome.error}
    return {"success": True, "data": outcome.data}


@router.post("/preference", status_code=status.HTTP_201_CREATED)
def create_preference(
    payload: PreferenceCreate,
    db: Session = Depends(get_db),
    gateway: MercadoPagoClient = Depends(get_gateway_client),
) -> dict[str, Any]:
    """Create a redirect checkout; the caller opens ``init_point``."""

    notification_url = payload.notification_url or get_settings().MERCADOPAGO_NOTIFICATION_URL
    try:
        preference = gateway.create_preference(
            [item.model_dump(exclude_none=True) for item in payload.items],
            payload.back_urls.model_dump() if payload.back_urls else None,
            notification_url,
        )
    except GatewayError as exc:
        logger.error("Failed to create MercadoPago preference", extra={"error": exc.message})
        raise _gateway_http_error(exc) from exc

    activities_service.record_activity(
        db,
        tipo="checkout",
        descricao="Nova preferência de pagamento criada",
        metadados={"preference_id": preference.get("id")},
        icone="shopping-cart-line",
        cor="accent",
    )
    db.commit()
    return preference


@router.post("/payment", status_code=status.HTTP_201_CREATED)
def create_payment(
    payload: PaymentCreate,
    db: Session = Depends(get_db),
    gateway: MercadoPagoClient = Depends(get_gateway_client),
) -> dict[str, Any]:
    """Submit a direct payment and mirror it as a local transaction."""

    try:
        payment = gateway.create_payment(payload.gateway_payload())
    except GatewayError as exc:
        logger.error("Failed to create MercadoPago payment", extra={"error": exc.message})
        raise _gateway_http_error(exc) from exc

    if payment.get("id") is not None:
        fields = derive_transaction(payment)
        if fields["checkout_id"] is None:
            fields["checkout_id"] = payload.checkout_id
        transaction, _created = transactions_service.upsert_transaction(db, fields)
        activities_service.record_activity(
            db,
            tipo="transacao",
            descricao=f"Nova transação iniciada - {transaction.referencia}",
            metadados={"referencia": transaction.referencia, "status": transaction.status},
            icone="secure-payment-line",
            cor="info",
        )
        db.commit()
    return payment


@router.get("/payment/{referencia}", response_model=TransactionRead)
def get_payment(referencia: str, db: Session = Depends(get_db)) -> Transaction:
    """Look up the local transaction mirroring a gateway payment id."""

    transaction = transactions_service.get_transaction_by_reference(db, referencia)
    if transaction is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_response("PAYMENT_NOT_FOUND", "Pagamento não encontrado"),
        )
    return transaction


__all__ = ["router"]
