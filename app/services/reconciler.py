"""Reconcile MercadoPago notifications into local transactions.

A notification only names a topic and a resource id. For ``payment`` the
authoritative payment is always re-fetched from the gateway before anything
is written, so a stale or forged notification body can never drive local
state.

Every attempt that reaches the gateway ends with exactly one delivery log
entry, success or failure. The HTTP layer acknowledges with 200 either way;
a failed reconciliation is only visible in the delivery log and the
operator logs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from sqlalchemy.orm import Session

from app.models.transaction import Transaction
from app.services import activities as activities_service
from app.services import transactions as transactions_service
from app.services import webhooks as webhooks_service

logger = logging.getLogger(__name__)

TOPIC_PAYMENT = "payment"
TOPIC_MERCHANT_ORDER = "merchant_order"

DEFAULT_CUSTOMER_NAME = "Cliente"
DEFAULT_CUSTOMER_EMAIL = "email@exemplo.com"
DEFAULT_CURRENCY = "BRL"
DEFAULT_STATUS = "pending"
DEFAULT_METHOD = "mercadopago"


class ReconciliationError(Exception):
    """Raised when a gateway payload cannot be mapped to a transaction."""


@dataclass
class ReconciliationResult:
    """Outcome of one notification.

    ``log_error`` is set when the failure delivery itself could not be
    written; callers must surface it to the operator log.
    """

    success: bool
    data: dict[str, Any] | None = None
    error: str | None = None
    transaction: Transaction | None = None
    log_error: str | None = None


def resolve_notification(gateway: Any, topic: str, resource_id: str) -> dict[str, Any]:
    """Return the normalized gateway view of a notification."""

    if topic == TOPIC_PAYMENT:
        return gateway.get_payment(resource_id)
    if topic == TOPIC_MERCHANT_ORDER:
        return {"status": "received", "id": resource_id}
    return {"status": "unhandled", "topic": topic, "id": resource_id}


def _parse_checkout_id(external_reference: Any) -> int | None:
    if external_reference is None:
        return None
    try:
        return int(str(external_reference).strip())
    except ValueError:
        return None


def derive_transaction(payment: Mapping[str, Any]) -> dict[str, Any]:
    """Map a gateway payment object to transaction fields.

    Pure and deterministic: the same payment always yields the same fields.
    """

    payment_id = payment.get("id")
    if payment_id is None or str(payment_id) == "":
        raise ReconciliationError("Gateway payment has no id")

    payer = payment.get("payer") or {}
    first_name = payer.get("first_name")
    last_name = payer.get("last_name")
    if first_name and last_name:
        cliente_nome = f"{first_name} {last_name}"
    else:
        cliente_nome = DEFAULT_CUSTOMER_NAME

    checkout_id = _parse_checkout_id(payment.get("external_reference"))
    if checkout_id is None:
        logger.warning(
            "Payment has no correlating checkout",
            extra={"payment_id": str(payment_id), "external_reference": payment.get("external_reference")},
        )

    return {
        "checkout_id": checkout_id,
        "cliente_nome": cliente_nome,
        "cliente_email": payer.get("email") or DEFAULT_CUSTOMER_EMAIL,
        "valor": payment.get("transaction_amount") or 0,
        "moeda": payment.get("currency_id") or DEFAULT_CURRENCY,
        "status": payment.get("status") or DEFAULT_STATUS,
        "metodo": payment.get("payment_method_id") or DEFAULT_METHOD,
        "referencia": str(payment_id),
        "metadata_json": dict(payment),
    }


def _apply_payment(db: Session, payment: dict[str, Any]) -> Transaction:
    fields = derive_transaction(payment)
    transaction, _created = transactions_service.upsert_transaction(db, fields)
    activities_service.record_activity(
        db,
        tipo="pagamento",
        descricao=f"Pagamento {payment.get('status')} de R$ {payment.get('transaction_amount')}",
        metadados={
            "valor": payment.get("transaction_amount"),
            "status": payment.get("status"),
            "id": payment.get("id"),
        },
        icone="notification-4-line",
        cor="success",
    )
    return transaction


def _record_failure(
    db: Session,
    *,
    topic: str,
    resource_id: str,
    source_url: str,
    message: str,
) -> str | None:
    """Best-effort failure delivery. Returns the error text if it could not be written."""

    try:
        webhooks_service.record_delivery(
            db,
            evento=topic,
            recurso_id=resource_id,
            url=source_url,
            sucesso=False,
            dados={"error": message},
        )
        webhooks_service.touch_subscriptions(db, topic=topic, status_code=500)
        db.commit()
    except Exception as exc:  # noqa: BLE001
        db.rollback()
        return str(exc) or exc.__class__.__name__
    return None


def reconcile_notification(
    db: Session,
    gateway: Any,
    *,
    topic: str,
    resource_id: str,
    source_url: str,
) -> ReconciliationResult:
    """Process one gateway notification end to end. Never raises."""

    transaction: Transaction | None = None
    try:
        result = resolve_notification(gateway, topic, resource_id)
        if topic == TOPIC_PAYMENT:
            transaction = _apply_payment(db, result)
        webhooks_service.record_delivery(
            db,
            evento=topic,
            recurso_id=resource_id,
            url=source_url,
            sucesso=True,
            dados=result,
        )
        webhooks_service.touch_subscriptions(db, topic=topic, status_code=200)
        db.commit()
    except Exception as exc:  # noqa: BLE001
        db.rollback()
        message = str(exc) or exc.__class__.__name__
        logger.exception(
            "Webhook reconciliation failed",
            extra={"topic": topic, "resource_id": resource_id},
        )
        log_error = _record_failure(
            db,
            topic=topic,
            resource_id=resource_id,
            source_url=source_url,
            message=message,
        )
        return ReconciliationResult(success=False, error=message, log_error=log_error)

    logger.info(
        "Webhook reconciled",
        extra={
            "topic": topic,
            "resource_id": resource_id,
            "transaction_id": transaction.id if transaction else None,
        },
    )
    return ReconciliationResult(success=True, data=result, transaction=transaction)


__all__ = [
    "ReconciliationError",
    "ReconciliationResult",
    "derive_transaction",
    "reconcile_notification",
    "resolve_notification",
]
