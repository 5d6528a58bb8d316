"""Webhook subscription and delivery schemas."""
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from .base import CamelInput, CamelRead


class WebhookSubscriptionCreate(CamelInput):
    evento: str = Field(min_length=1, max_length=100)
    url: str = Field(min_length=1, max_length=500)
    ativo: bool = True


class WebhookSubscriptionUpdate(CamelInput):
    evento: str | None = Field(default=None, min_length=1, max_length=100)
    url: str | None = Field(default=None, min_length=1, max_length=500)
    ativo: bool | None = None
    ultimo_status: int | None = None
    ultima_execucao: datetime | None = None

    @field_validator("evento", "url", "ativo")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class WebhookSubscriptionRead(CamelRead):
    id: int
    evento: str
    url: str
    ativo: bool
    ultimo_status: int | None
    ultima_execucao: datetime | None
    created_at: datetime = Field(serialization_alias="dataCriacao")


class WebhookDeliveryRead(CamelRead):
    id: int
    evento: str
    recurso_id: str | None
    url: str
    sucesso: bool
    ultimo_status: int
    ultima_execucao: datetime
    dados: dict[str, Any] | None
