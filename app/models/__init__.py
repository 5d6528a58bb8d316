"""ORM models package."""
from .activity import Activity
from .base import Base
from .transaction import Transaction
from .webhook import WebhookDelivery, WebhookSubscription

__all__ = [
    "Activity",
    "Base",
    "Transaction",
    "WebhookDelivery",
    "WebhookSubscription",
]
