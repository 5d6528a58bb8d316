"""Transaction endpoints for the dashboard."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.transaction import Transaction
from app.schemas.transaction import TransactionCreate, TransactionRead
from app.services import activities as activities_service
from app.services import transactions as transactions_service
from app.utils.errors import error_response

router = APIRouter(prefix="/api/transacoes", tags=["transactions"])


@router.get("", response_model=list[TransactionRead])
def list_transactions(db: Session = Depends(get_db)) -> list[Transaction]:
    return transactions_service.list_transactions(db)


@router.get("/{transaction_id}", response_model=TransactionRead)
def get_transaction(transaction_id: int, db: Session = Depends(get_db)) -> Transaction:
    transaction = transactions_service.get_transaction(db, transaction_id)
    if transaction is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_response("TRANSACTION_NOT_FOUND", "Transação não encontrada"),
        )
    return transaction


@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
def create_transaction(payload: TransactionCreate, db: Session = Depends(get_db)) -> Transaction:
    """Register a transaction manually."""

    try:
        transaction = transactions_service.create_transaction(db, payload.model_dump())
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=error_response(
                "TRANSACTION_REFERENCE_EXISTS",
                "Já existe uma transação com esta referência.",
                {"referencia": payload.referencia},
            ),
        ) from exc

    activities_service.record_activity(
        db,
        tipo="transacao",
        descricao=f"Nova transação registrada - {transaction.referencia}",
        icone="exchange-funds-line",
        cor="success",
    )
    db.commit()
    db.refresh(transaction)
    return transaction
