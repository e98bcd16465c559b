# -*- coding: utf-8 -*-
"""
backend/app/main.py

Punto de entrada principal del backend de Vitrina.

Ajustes clave:
- .env cargado con python-dotenv antes de leer settings
- create_app(): logging, CORS, middlewares, routers y /metrics
- lifespan: construye una sola vez PaymentsSettings, el cliente PayPal,
  el ledger y los dispatchers de webhooks y los deja en app.state;
  al apagar cierra el cliente HTTP y el engine
- En dev/test con SQLite las tablas se crean al arrancar

Autor: Vitrina
Fecha: 2026-09-16
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

# ---------------------------------------------------------------------------
# Cargar .env ANTES de cualquier import que lea settings
# En PROD: override=False para respetar variables del entorno
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_ENVIRONMENT = os.getenv("ENVIRONMENT", "development").strip().lower()
load_dotenv(dotenv_path=_ENV_PATH, override=_ENVIRONMENT != "production")

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.logging import configure_logging
from app.core.settings import get_settings
from app.modules.payments.enums import PaymentProvider
from app.modules.payments.facades.webhooks import (
    PayPalWebhookVerifier,
    StripeWebhookVerifier,
    WebhookDispatcher,
)
from app.modules.payments.services import EntitlementLedger, PayPalClient
from app.observability.prom import setup_observability
from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.database.database import dispose_engine, init_models
from app.shared.middleware import JSONExceptionMiddleware, RequestLoggingMiddleware

logger = logging.getLogger(__name__)


def build_payment_components(
    app: FastAPI,
    payments_settings: PaymentsSettings,
    paypal_client: PayPalClient,
) -> None:
    """Composition root de pagos: todo se guarda en app.state."""
    ledger = EntitlementLedger(price_tolerance_cents=payments_settings.price_tolerance_cents)

    app.state.payments_settings = payments_settings
    app.state.paypal_client = paypal_client
    app.state.ledger = ledger
    app.state.stripe_dispatcher = WebhookDispatcher(
        PaymentProvider.STRIPE,
        payments_settings,
        ledger,
        StripeWebhookVerifier(payments_settings),
    )
    app.state.paypal_dispatcher = WebhookDispatcher(
        PaymentProvider.PAYPAL,
        payments_settings,
        ledger,
        PayPalWebhookVerifier(payments_settings, paypal_client),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    settings = get_settings()
    payments_settings = app.state.payments_settings_override or get_payments_settings()
    paypal_client = app.state.paypal_client_override or PayPalClient(payments_settings)
    build_payment_components(app, payments_settings, paypal_client)

    if settings.is_sqlite and not settings.is_prod:
        await init_models()
        logger.info("Tablas creadas en SQLite (%s)", settings.python_env)

    logger.info("Backend de %s iniciado (env=%s)", settings.app_name, settings.python_env)
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        await paypal_client.aclose()
        await dispose_engine()
        logger.info("Backend de %s apagado.", settings.app_name)


def _configure_cors(app_instance: FastAPI) -> None:
    settings = get_settings()
    origins = settings.get_cors_origins()
    allow_credentials = "*" not in origins
    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        max_age=600,
    )
    logger.info("CORS habilitado para %d origen(es) (credentials=%s)", len(origins), allow_credentials)


def create_app(
    *,
    payments_settings: Optional[PaymentsSettings] = None,
    paypal_client: Optional[PayPalClient] = None,
) -> FastAPI:
    """
    Construye la aplicación.

    Los argumentos permiten inyectar configuración y cliente PayPal (tests);
    por defecto se leen del entorno en el lifespan.
    """
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Catálogo, checkout y conciliación de pagos",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.payments_settings_override = payments_settings
    app.state.paypal_client_override = paypal_client

    # Starlette ejecuta los middlewares en orden inverso al registro:
    # CORS queda como el más externo
    setup_observability(app, enabled=settings.metrics_enabled)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(JSONExceptionMiddleware)
    _configure_cors(app)

    from app.routes import router as main_router

    app.include_router(main_router)

    @app.get("/")
    async def root():
        return {"service": settings.app_name, "status": "active"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))

# Fin del archivo backend/app/main.py
