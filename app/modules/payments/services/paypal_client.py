# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/paypal_client.py

Cliente HTTP de la REST API de PayPal (httpx async).

- Un AsyncClient por instancia con keep-alive; se construye una vez en el
  arranque y se cierra en el lifespan (aclose).
- Token OAuth client-credentials cacheado con TTL (margen de 60s).
- Un único reintento para errores transitorios (429/502/503/504) y timeouts.

Lo usan la verificación de firmas de webhooks y la creación de órdenes
de checkout.

Autor: Vitrina
Fecha: 2026-09-08
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

import httpx

from app.shared.config.settings_payments import PaymentsSettings

logger = logging.getLogger(__name__)


# =============================================================================
# LÍMITES Y POLÍTICA DE REINTENTOS
# =============================================================================

PAYPAL_HTTP_LIMITS = httpx.Limits(
    max_keepalive_connections=20,
    max_connections=50,
    keepalive_expiry=30.0,
)

TRANSIENT_HTTP_ERRORS = frozenset({429, 502, 503, 504})
MAX_TRANSIENT_RETRIES = 1
RETRY_BACKOFF_BASE = 0.5
RETRY_BACKOFF_429 = 2.0

VERIFY_WEBHOOK_PATH = "/v1/notifications/verify-webhook-signature"
TOKEN_PATH = "/v1/oauth2/token"
ORDERS_PATH = "/v2/checkout/orders"


class PayPalApiError(Exception):
    """Error de la API de PayPal (HTTP no exitoso o red)."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, transient: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.transient = transient


def is_transient_status(status_code: int) -> bool:
    return status_code in TRANSIENT_HTTP_ERRORS


def backoff_for(status_code: Optional[int], attempt: int, base: float) -> float:
    # 429 espera más (rate limiting)
    factor = RETRY_BACKOFF_429 / RETRY_BACKOFF_BASE if status_code == 429 else 1.0
    return base * factor * (2 ** attempt)


class PayPalClient:
    """Cliente reutilizable de la API de PayPal."""

    def __init__(
        self,
        settings: PaymentsSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_backoff: float = RETRY_BACKOFF_BASE,
    ) -> None:
        self.settings = settings
        self.base_url = settings.paypal_api_base
        self._transport = transport
        self._retry_backoff = retry_backoff
        self._client: Optional[httpx.AsyncClient] = None
        self._token: Optional[Tuple[str, float]] = None

    # -------------------------------------------------------------------------
    # Ciclo de vida
    # -------------------------------------------------------------------------
    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(
                    self.settings.paypal_http_timeout_seconds,
                    connect=self.settings.paypal_http_connect_timeout_seconds,
                ),
                limits=PAYPAL_HTTP_LIMITS,
                transport=self._transport,
            )
            logger.debug("Cliente PayPal HTTP creado (base_url=%s)", self.base_url)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            logger.debug("Cliente PayPal HTTP cerrado")
        self._client = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.settings.paypal_client_id and self.settings.paypal_client_secret)

    # -------------------------------------------------------------------------
    # Transporte con reintento
    # -------------------------------------------------------------------------
    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Ejecuta la petición con un reintento para errores transitorios.

        Raises:
            PayPalApiError(transient=True): timeout/red o 429/5xx tras reintentar.
        """
        last_status: Optional[int] = None
        for attempt in range(MAX_TRANSIENT_RETRIES + 1):
            try:
                response = await self.client.request(method, path, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as e:
                if attempt < MAX_TRANSIENT_RETRIES:
                    delay = backoff_for(None, attempt, self._retry_backoff)
                    logger.warning(
                        "PayPal %s %s: %s, reintentando en %.2fs", method, path, type(e).__name__, delay
                    )
                    await asyncio.sleep(delay)
                    continue
                raise PayPalApiError(f"PayPal {path} no respondió: {e}", transient=True) from e

            if is_transient_status(response.status_code):
                last_status = response.status_code
                if attempt < MAX_TRANSIENT_RETRIES:
                    delay = backoff_for(response.status_code, attempt, self._retry_backoff)
                    logger.warning(
                        "PayPal %s %s: error transitorio %s, reintentando en %.2fs",
                        method, path, response.status_code, delay,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise PayPalApiError(
                    f"PayPal {path} respondió {response.status_code}",
                    status_code=response.status_code,
                    transient=True,
                )
            return response

        raise PayPalApiError(f"PayPal {path} agotó reintentos", status_code=last_status, transient=True)

    # -------------------------------------------------------------------------
    # OAuth
    # -------------------------------------------------------------------------
    async def get_access_token(self) -> str:
        """Token client-credentials, servido desde cache mientras no expire."""
        if self._token is not None:
            token, expires_at = self._token
            if time.monotonic() < expires_at:
                return token
            self._token = None

        if not self.has_credentials:
            raise PayPalApiError("PAYPAL_CLIENT_ID/PAYPAL_CLIENT_SECRET no configurados")

        response = await self._request(
            "POST",
            TOKEN_PATH,
            auth=(self.settings.paypal_client_id, self.settings.paypal_client_secret),
            data={"grant_type": "client_credentials"},
            headers={"Accept": "application/json"},
        )
        if response.status_code != 200:
            logger.error("PayPal token request falló: %s - %s", response.status_code, response.text[:200])
            raise PayPalApiError("PayPal token request falló", status_code=response.status_code)

        data = response.json()
        token = data.get("access_token")
        if not token:
            raise PayPalApiError("PayPal token response sin access_token", status_code=200)

        ttl = max(int(data.get("expires_in", 3600)) - 60, 60)
        self._token = (token, time.monotonic() + ttl)
        logger.debug("PayPal access token obtenido y cacheado (TTL=%ss)", ttl)
        return token

    def clear_token_cache(self) -> None:
        self._token = None

    # -------------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------------
    async def verify_webhook_signature(
        self,
        raw_body: bytes,
        transmission: Dict[str, str],
        webhook_id: str,
    ) -> Optional[str]:
        """
        Llama a verify-webhook-signature y devuelve verification_status.

        El evento se envía con los bytes originales (sin re-serializar).
        Devuelve None si PayPal rechaza la petición (4xx distinto de 429).
        """
        fields = dict(transmission)
        fields["webhook_id"] = webhook_id
        content = json.dumps(fields)[:-1] + ',"webhook_event":' + raw_body.decode("utf-8") + "}"

        token = await self.get_access_token()
        response = await self._request(
            "POST",
            VERIFY_WEBHOOK_PATH,
            content=content.encode("utf-8"),
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
        )
        if response.status_code >= 500:
            raise PayPalApiError(
                f"PayPal verify respondió {response.status_code}",
                status_code=response.status_code,
                transient=True,
            )
        if response.status_code != 200:
            logger.warning(
                "PayPal verify-webhook-signature rechazó la petición: %s - %s",
                response.status_code, response.text[:200],
            )
            return None
        return str(response.json().get("verification_status", ""))

    # -------------------------------------------------------------------------
    # Órdenes (checkout)
    # -------------------------------------------------------------------------
    async def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        token = await self.get_access_token()
        response = await self._request(
            "POST",
            ORDERS_PATH,
            json=payload,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
        )
        if response.status_code not in (200, 201):
            logger.error("PayPal create order falló: %s - %s", response.status_code, response.text[:200])
            raise PayPalApiError("PayPal create order falló", status_code=response.status_code)
        return response.json()


__all__ = [
    "PayPalClient",
    "PayPalApiError",
    "PAYPAL_HTTP_LIMITS",
    "TRANSIENT_HTTP_ERRORS",
    "MAX_TRANSIENT_RETRIES",
    "is_transient_status",
]

# Fin del archivo backend/app/modules/payments/services/paypal_client.py
