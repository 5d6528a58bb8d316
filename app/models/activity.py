"""Activity feed model."""
from datetime import datetime

from sqlalchemy import DateTime, Index, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from app.utils.time import utcnow

from .base import Base


class Activity(Base):
    """Represents a business event shown in the dashboard feed."""

    __tablename__ = "atividades"
    __table_args__ = (Index("ix_atividades_data", "data"),)

    tipo: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    descricao: Mapped[str] = mapped_column(String(255), nullable=False)
    metadados: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    icone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    cor: Mapped[str | None] = mapped_column(String(20), nullable=True)
    data: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
