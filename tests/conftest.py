# backend/tests/conftest.py
# -*- coding: utf-8 -*-
"""
Config global de tests para Vitrina.

- Entorno de pruebas (PYTHON_ENV=test) con SQLite en memoria: cada test
  obtiene un engine nuevo y lo descarta al terminar
- Caches de settings limpiados antes de cada test
- App FastAPI construida con PaymentsSettings explícitos y un cliente
  PayPal sobre httpx.MockTransport (nunca sale a la red)
- Helpers como fixtures: firma Stripe, firma HMAC de ingesta, JWT y alta
  de productos en el catálogo
"""

import os

# -----------------------------------------------------------------------------
# 0) Entorno ANTES de importar la app
# -----------------------------------------------------------------------------
TEST_JWT_SECRET = "vitrina-test-jwt-secret-with-32-chars-min"

os.environ["PYTHON_ENV"] = "test"
os.environ["ENVIRONMENT"] = "test"
os.environ["DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ.pop("PAYMENTS_ALLOW_INSECURE_WEBHOOKS", None)

import hashlib
import hmac
import json
import time
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx
import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from jose import jwt

from app.shared.config.config_loader import get_settings
from app.shared.config.settings_payments import PaymentsSettings, reset_payments_settings
from app.shared.database.database import dispose_engine, init_models, session_scope

STRIPE_WEBHOOK_SECRET = "whsec_test_vitrina"
INGEST_HMAC_SECRET = "ingest-test-secret"
PAYPAL_WEBHOOK_ID = "WH-TEST-0001"


# -----------------------------------------------------------------------------
# 1) Estado global limpio por test
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _reset_settings_caches():
    get_settings.cache_clear()
    reset_payments_settings()
    yield
    get_settings.cache_clear()
    reset_payments_settings()


@pytest.fixture
async def db_session():
    """Sesión sobre una BD en memoria recién creada (sin app)."""
    await init_models()
    try:
        async with session_scope() as session:
            yield session
    finally:
        await dispose_engine()


# -----------------------------------------------------------------------------
# 2) Configuración de pagos y PayPal simulado
# -----------------------------------------------------------------------------
@pytest.fixture
def payments_settings() -> PaymentsSettings:
    return PaymentsSettings(
        stripe_secret_key="sk_test_vitrina",
        stripe_webhook_secret=STRIPE_WEBHOOK_SECRET,
        paypal_client_id="paypal-client",
        paypal_client_secret="paypal-secret",
        paypal_webhook_id=PAYPAL_WEBHOOK_ID,
        paypal_mode="sandbox",
        ingest_hmac_secret=INGEST_HMAC_SECRET,
        app_url="https://vitrina.test/",
        allow_insecure_webhooks=False,
    )


class PayPalStub:
    """Respuestas configurables de la API de PayPal para httpx.MockTransport."""

    def __init__(self) -> None:
        self.verification_status = "SUCCESS"
        self.verify_status_code = 200
        self.order_status_code = 201
        self.order_links = [
            {"rel": "self", "href": "https://api-m.sandbox.paypal.com/v2/checkout/orders/ORDER-1"},
            {"rel": "approve", "href": "https://www.sandbox.paypal.com/checkoutnow?token=ORDER-1"},
        ]
        self.requests: list[httpx.Request] = []
        self.token_calls = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/v1/oauth2/token":
            self.token_calls += 1
            return httpx.Response(200, json={"access_token": "A21-test-token", "expires_in": 32400})
        if path == "/v1/notifications/verify-webhook-signature":
            if self.verify_status_code != 200:
                return httpx.Response(self.verify_status_code, json={"name": "ERROR"})
            return httpx.Response(200, json={"verification_status": self.verification_status})
        if path == "/v2/checkout/orders":
            if self.order_status_code not in (200, 201):
                return httpx.Response(self.order_status_code, json={"name": "UNPROCESSABLE_ENTITY"})
            return httpx.Response(201, json={"id": "ORDER-1", "status": "CREATED", "links": self.order_links})
        return httpx.Response(404, json={"name": "RESOURCE_NOT_FOUND"})

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def paypal_stub() -> PayPalStub:
    return PayPalStub()


@pytest.fixture
def paypal_client(payments_settings, paypal_stub):
    from app.modules.payments.services.paypal_client import PayPalClient

    return PayPalClient(
        payments_settings,
        transport=httpx.MockTransport(paypal_stub.handler),
        retry_backoff=0,
    )


# -----------------------------------------------------------------------------
# 3) App FastAPI y cliente httpx (con ciclo de vida)
# -----------------------------------------------------------------------------
@pytest.fixture
def app(payments_settings, paypal_client):
    from app.main import create_app

    return create_app(payments_settings=payments_settings, paypal_client=paypal_client)


@pytest.fixture
async def async_client(app):
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client


# -----------------------------------------------------------------------------
# 4) Helpers
# -----------------------------------------------------------------------------
@pytest.fixture
def sign_stripe():
    def _sign(body: bytes, secret: str = STRIPE_WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
        ts = int(time.time()) if timestamp is None else timestamp
        digest = hmac.new(secret.encode("utf-8"), f"{ts}.".encode("utf-8") + body, hashlib.sha256).hexdigest()
        return f"t={ts},v1={digest}"

    return _sign


@pytest.fixture
def sign_ingest():
    def _sign(body: bytes, secret: str = INGEST_HMAC_SECRET) -> str:
        return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()

    return _sign


@pytest.fixture
def make_token():
    def _make(sub: str = "user-1", email: Optional[str] = "reader@vitrina.test", expires_in: int = 3600) -> str:
        claims = {"sub": sub, "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in)}
        if email:
            claims["email"] = email
        return jwt.encode(claims, TEST_JWT_SECRET, algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token):
    def _headers(sub: str = "user-1") -> dict:
        return {"Authorization": f"Bearer {make_token(sub)}"}

    return _headers


@pytest.fixture
def seed_product():
    """Alta directa de un producto (y su serie) en su propia sesión."""
    from app.modules.catalog.enums import ProductType, SeriesInterval
    from app.modules.catalog.models import Product, Series

    async def _seed(
        product_id: str = "prod-1",
        *,
        price_cents: int = 1900,
        is_series: bool = False,
        series_price_cents: int = 500,
        stripe_price_id: Optional[str] = None,
    ) -> str:
        async with session_scope() as session:
            session.add(
                Product(
                    id=product_id,
                    slug=f"slug-{product_id}",
                    title=f"Producto {product_id}",
                    type=ProductType.NEWSLETTER if is_series else ProductType.EBOOK,
                    price_cents=price_cents,
                    is_series=is_series,
                )
            )
            if is_series:
                session.add(
                    Series(
                        product_id=product_id,
                        interval=SeriesInterval.MONTH,
                        price_cents=series_price_cents,
                        stripe_price_id=stripe_price_id,
                    )
                )
            await session.commit()
        return product_id

    return _seed


@pytest.fixture
def dump_json():
    def _dump(payload: dict) -> bytes:
        return json.dumps(payload, separators=(",", ":")).encode("utf-8")

    return _dump

# Fin del archivo backend/tests/conftest.py
