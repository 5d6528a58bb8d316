"""Transaction store."""
import logging
from typing import Any, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.transaction import Transaction

logger = logging.getLogger(__name__)

# Fields owned by the gateway; refreshed on every reconciliation.
_GATEWAY_FIELDS = (
    "cliente_nome",
    "cliente_email",
    "valor",
    "moeda",
    "status",
    "metodo",
    "metadata_json",
)


def create_transaction(db: Session, fields: dict[str, Any]) -> Transaction:
    """Insert a transaction and flush so the id is assigned; the caller commits."""

    transaction = Transaction(**fields)
    db.add(transaction)
    db.flush()
    return transaction


def get_transaction(db: Session, transaction_id: int) -> Transaction | None:
    return db.get(Transaction, transaction_id)


def get_transaction_by_reference(db: Session, referencia: str) -> Transaction | None:
    stmt = select(Transaction).where(Transaction.referencia == referencia)
    return db.scalars(stmt).one_or_none()


def list_transactions(db: Session) -> list[Transaction]:
    """Return transactions most recent first."""

    stmt = select(Transaction).order_by(Transaction.data.desc(), Transaction.id.desc())
    return list(db.scalars(stmt).all())


def _refresh_from_gateway(transaction: Transaction, fields: dict[str, Any]) -> None:
    for name in _GATEWAY_FIELDS:
        if name in fields:
            setattr(transaction, name, fields[name])
    if transaction.checkout_id is None and fields.get("checkout_id") is not None:
        transaction.checkout_id = fields["checkout_id"]


def upsert_transaction(db: Session, fields: dict[str, Any]) -> Tuple[Transaction, bool]:
    """Insert or refresh the transaction keyed by ``referencia``.

    Returns the entity and whether it was newly created. Must be the first
    write of the unit of work: losing the unique-constraint race rolls the
    session back before retrying as an update.
    """

    referencia = fields["referencia"]
    existing = get_transaction_by_reference(db, referencia)
    if existing is not None:
        _refresh_from_gateway(existing, fields)
        db.flush()
        logger.info(
            "Transaction refreshed from gateway",
            extra={"transaction_id": existing.id, "referencia": referencia, "status": existing.status},
        )
        return existing, False

    try:
        transaction = create_transaction(db, fields)
    except IntegrityError:
        db.rollback()
        existing = get_transaction_by_reference(db, referencia)
        if existing is None:
            raise
        _refresh_from_gateway(existing, fields)
        db.flush()
        logger.info(
            "Transaction refreshed after concurrent insert",
            extra={"transaction_id": existing.id, "referencia": referencia},
        )
        return existing, False

    logger.info(
        "Transaction created",
        extra={"transaction_id": transaction.id, "referencia": referencia, "status": transaction.status},
    )
    return transaction, True


__all__ = [
    "create_transaction",
    "get_transaction",
    "get_transaction_by_reference",
    "list_transactions",
    "upsert_transaction",
]
