"""MercadoPago REST wrapper for payment and checkout-preference operations."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence
from uuid import uuid4

import httpx

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Raised when MercadoPago is unreachable, unconfigured, or rejects a call."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class MercadoPagoClient:
    """Thin synchronous client around the MercadoPago REST API.

    Every call is a single request/response: no retries and no backoff. An
    ``httpx.Client`` can be injected (tests pass one built on
    ``httpx.MockTransport``); otherwise one is created from the settings and
    owned by this instance.
    """

    def __init__(self, settings: Settings, http_client: httpx.Client | None = None) -> None:
        self.settings = settings
        self._access_token = settings.MERCADOPAGO_ACCESS_TOKEN
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(
            base_url=settings.MERCADOPAGO_BASE_URL,
            timeout=settings.MERCADOPAGO_TIMEOUT_SECONDS,
        )

    @classmethod
    def from_env(cls) -> "MercadoPagoClient":
        """Instantiate a client using the cached application settings."""

        return cls(get_settings())

    @property
    def configured(self) -> bool:
        return bool(self._access_token)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def _ensure_configured(self) -> None:
        if not self._access_token:
            raise GatewayError(
                "MercadoPago access token is missing; configure MERCADOPAGO_ACCESS_TOKEN."
            )

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        self._ensure_configured()
        request_headers = {"Authorization": f"Bearer {self._access_token}"}
        if headers:
            request_headers.update(headers)

        try:
            response = self._http.request(method, path, json=json, headers=request_headers)
        except httpx.HTTPError as exc:
            logger.error(
                "MercadoPago request failed",
                extra={"method": method, "path": path, "error": str(exc)},
            )
            raise GatewayError(f"MercadoPago unreachable: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {"raw": response.text}

        if response.is_error:
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.warning(
                "MercadoPago returned an error",
                extra={"method": method, "path": path, "status_code": response.status_code},
            )
            raise GatewayError(
                message or f"MercadoPago returned HTTP {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )
        return payload

    def create_payment(self, payment_data: Mapping[str, Any]) -> dict[str, Any]:
        """Submit a direct payment and return the gateway's payment object."""

        return self._request(
            "POST",
            "/v1/payments",
            json=dict(payment_data),
            headers={"X-Idempotency-Key": uuid4().hex},
        )

    def get_payment(self, payment_id: str) -> dict[str, Any]:
        """Fetch the current state of a payment by its gateway id."""

        return self._request("GET", f"/v1/payments/{payment_id}")

    def create_preference(
        self,
        items: Sequence[Mapping[str, Any]],
        back_urls: Mapping[str, str] | None,
        notification_url: str | None = None,
    ) -> dict[str, Any]:
        """Create a redirect-checkout preference; the result carries ``init_point``."""

        preference_data: dict[str, Any] = {"items": [dict(item) for item in items]}
        if back_urls:
            # MercadoPago rejects auto_return without a success back URL.
            preference_data["back_urls"] = dict(back_urls)
            preference_data["auto_return"] = "approved"
        if notification_url:
            preference_data["notification_url"] = notification_url

        return self._request("POST", "/checkout/preferences", json=preference_data)


def get_gateway_client():
    """FastAPI dependency yielding a request-scoped MercadoPago client."""

    client = MercadoPagoClient.from_env()
    try:
        yield client
    finally:
        client.close()


__all__ = ["GatewayError", "MercadoPagoClient", "get_gateway_client"]
