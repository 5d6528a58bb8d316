"""Webhook subscription and delivery models."""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

URL_MAX_LENGTH = 500
RESOURCE_ID_MAX_LENGTH = 100


class WebhookSubscription(Base):
    """A dashboard-configured webhook endpoint that can be toggled on and off."""

    __tablename__ = "webhooks"

    evento: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(URL_MAX_LENGTH), nullable=False)
    ativo: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    ultimo_status: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ultima_execucao: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class WebhookDelivery(Base):
    """Append-only record of one inbound gateway notification processing attempt."""

    __tablename__ = "webhook_entregas"
    __table_args__ = (
        Index("ix_webhook_entregas_ultima_execucao", "ultima_execucao"),
        Index("ix_webhook_entregas_evento_recurso", "evento", "recurso_id"),
    )

    evento: Mapped[str] = mapped_column(String(100), nullable=False)
    recurso_id: Mapped[str | None] = mapped_column(String(RESOURCE_ID_MAX_LENGTH), nullable=True)
    url: Mapped[str] = mapped_column(String(URL_MAX_LENGTH), nullable=False)
    sucesso: Mapped[bool] = mapped_column(Boolean, nullable=False)
    ultimo_status: Mapped[int] = mapped_column(Integer, nullable=False)
    ultima_execucao: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    dados: Mapped[dict | None] = mapped_column(JSON, nullable=True)
