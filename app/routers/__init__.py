"""API routers for the PayHub backend."""
from fastapi import APIRouter

from . import activities, health, mercadopago, transactions, webhooks


def get_api_router() -> APIRouter:
    """Return the root API router."""

    api_router = APIRouter()
    api_router.include_router(health.router)
    api_router.include_router(mercadopago.router)
    api_router.include_router(transactions.router)
    api_router.include_router(webhooks.router)
    api_router.include_router(activities.router)
    return api_router
