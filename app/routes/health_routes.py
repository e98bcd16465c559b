# -*- coding: utf-8 -*-
"""
backend/app/routes/health_routes.py

Health check del backend de Vitrina.

Además de la conectividad a la base de datos informa qué integraciones de
pago tienen credenciales cargadas. Nunca expone los secretos, solo si
están presentes. Siempre responde 200; el estado "degraded" lo interpreta
el orquestador.

Autor: Vitrina
Fecha: 2026-09-16
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request

from app.core.settings import get_settings
from app.core.db import check_database_health

router = APIRouter(tags=["health"])


def _providers_status(request: Request) -> Dict[str, Any]:
    payments = getattr(request.app.state, "payments_settings", None)
    if payments is None:
        return {}
    return {
        "stripe": {
            "checkout": bool(payments.stripe_secret_key),
            "webhooks": bool(payments.stripe_webhook_secret),
        },
        "paypal": {
            "checkout": bool(payments.paypal_client_id and payments.paypal_client_secret),
            "webhooks": bool(payments.paypal_webhook_id),
            "mode": payments.paypal_mode,
        },
        "ingest": bool(payments.ingest_hmac_secret),
        "insecure_webhooks": payments.allow_insecure_webhooks,
    }


@router.get(
    "/health",
    summary="Health check del backend",
    description="Conectividad a la base de datos y credenciales de pago configuradas.",
)
async def health_check(request: Request) -> dict:
    settings = get_settings()
    db_ok = await check_database_health(timeout_s=2.0)

    return {
        "status": "ok" if db_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.python_env,
        "database": {"reachable": db_ok},
        "providers": _providers_status(request),
        "service": {"name": settings.app_name, "version": settings.app_version},
    }

# Fin del archivo backend/app/routes/health_routes.py
