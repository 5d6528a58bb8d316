"""Schema package exports."""
from .activity import ActivityRead
from .mercadopago import BackUrls, PaymentCreate, PreferenceCreate, PreferenceItem
from .transaction import TransactionCreate, TransactionRead
from .webhook import (
    WebhookDeliveryRead,
    WebhookSubscriptionCreate,
    WebhookSubscriptionRead,
    WebhookSubscriptionUpdate,
)

__all__ = [
    "ActivityRead",
    "BackUrls",
    "PaymentCreate",
    "PreferenceCreate",
    "PreferenceItem",
    "TransactionCreate",
    "TransactionRead",
    "WebhookDeliveryRead",
    "WebhookSubscriptionCreate",
    "WebhookSubscriptionRead",
    "WebhookSubscriptionUpdate",
]
