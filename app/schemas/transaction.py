"""Transaction schemas."""
from datetime import datetime
from typing import Any

from pydantic import EmailStr, Field

from .base import CamelInput, CamelRead


class TransactionCreate(CamelInput):
    checkout_id: int | None = None
    cliente_nome: str = Field(min_length=1)
    cliente_email: EmailStr
    valor: float = Field(ge=0)
    moeda: str = Field(default="BRL", min_length=3, max_length=3)
    status: str = Field(min_length=1)
    metodo: str = Field(min_length=1)
    referencia: str = Field(min_length=1)
    metadata_json: dict[str, Any] | None = Field(default=None, alias="metadata")


class TransactionRead(CamelRead):
    id: int
    checkout_id: int | None
    cliente_nome: str
    cliente_email: str
    valor: float
    moeda: str
    status: str
    metodo: str
    referencia: str
    metadata_json: dict[str, Any] | None = Field(default=None, serialization_alias="metadata")
    data: datetime
    created_at: datetime = Field(serialization_alias="dataCriacao")
