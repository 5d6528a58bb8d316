"""MercadoPago request schemas."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .base import CamelInput


class PreferenceItem(BaseModel):
    id: str | None = None
    title: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    unit_price: float = Field(gt=0)
    currency_id: str | None = None
    description: str | None = None
    picture_url: str | None = None


class BackUrls(BaseModel):
    success: str
    failure: str
    pending: str


class PreferenceCreate(CamelInput):
    items: list[PreferenceItem] = Field(min_length=1)
    back_urls: BackUrls | None = None
    notification_url: str | None = None


class PaymentCreate(BaseModel):
    """Gateway-shaped payment request; unknown keys are forwarded untouched."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    transaction_amount: float = Field(gt=0)
    payment_method_id: str | None = None
    payer: dict[str, Any] | None = None
    checkout_id: int | None = Field(default=None, alias="checkoutId")

    def gateway_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude={"checkout_id"}, exclude_none=True)
