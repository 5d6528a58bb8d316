"""Transaction model."""
from datetime import datetime

from sqlalchemy import DateTime, Float, Index, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from app.utils.time import utcnow

from .base import Base


class Transaction(Base):
    """A payment mirrored from the gateway, keyed by the gateway payment id."""

    __tablename__ = "transacoes"
    __table_args__ = (
        Index("ix_transacoes_data", "data"),
        Index("ix_transacoes_status", "status"),
    )

    checkout_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    cliente_nome: Mapped[str] = mapped_column(String(255), nullable=False)
    cliente_email: Mapped[str] = mapped_column(String(255), nullable=False)
    valor: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False, default=0)
    moeda: Mapped[str] = mapped_column(String(3), nullable=False, default="BRL")
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    metodo: Mapped[str] = mapped_column(String(100), nullable=False)
    referencia: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    # ``metadata`` is reserved on declarative classes.
    metadata_json: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
    data: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
