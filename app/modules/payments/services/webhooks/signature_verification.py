# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/webhooks/signature_verification.py

Verificación de firmas de webhooks (Stripe, PayPal) y del canal de ingesta.

IMPORTANTE:
- Siempre se verifica sobre los bytes crudos del body, antes de parsear JSON.
- Stripe: HMAC-SHA256 sobre "{t}." + body, con tolerancia de timestamp.
- Ingesta: HMAC-SHA256 hex sobre el body (header x-hmac-signature).
- PayPal: verificación vía API oficial (verify-webhook-signature).
- Comparaciones en tiempo constante (hmac.compare_digest).
- El bypass inseguro SOLO funciona en desarrollo y nunca con PYTHON_ENV=test.

Autor: Vitrina
Fecha: 2026-09-08
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import os
import time
from typing import Dict, List, Mapping, Optional

from app.modules.payments.services.paypal_client import PayPalApiError, PayPalClient
from app.shared.config.settings_payments import PaymentsSettings

logger = logging.getLogger(__name__)


# =============================================================================
# ERRORES
# =============================================================================

class WebhookAuthError(Exception):
    """Fallo de autenticidad del webhook (no reintentable por el proveedor)."""


class MissingCredential(WebhookAuthError):
    """Falta el header de firma o el secreto configurado."""


class InvalidSignature(WebhookAuthError):
    """La firma no corresponde al body recibido."""


class VerificationUnavailable(Exception):
    """No se pudo verificar por un fallo transitorio del proveedor (reintentable)."""


# =============================================================================
# ENVIRONMENT CHECKS
# =============================================================================

DEV_ENVIRONMENTS = ("development", "dev", "local")


def _is_development_environment() -> bool:
    """
    Solo en desarrollo se permite el bypass de verificación.
    "test" NO es desarrollo: los tests deben ser fail-closed.
    """
    env = os.getenv("ENVIRONMENT", "production").lower()
    python_env = os.getenv("PYTHON_ENV", "production").lower()
    return env in DEV_ENVIRONMENTS or python_env in DEV_ENVIRONMENTS


def allow_insecure_webhooks(settings: PaymentsSettings) -> bool:
    """
    Determina si se permite el bypass de verificación de firmas.

    REGLAS:
    1. PAYMENTS_ALLOW_INSECURE_WEBHOOKS debe estar activo
    2. El entorno debe ser de desarrollo
    3. PYTHON_ENV != "test"
    """
    if os.getenv("PYTHON_ENV", "production").lower() == "test":
        return False

    if not settings.allow_insecure_webhooks:
        return False

    if not _is_development_environment():
        logger.error(
            "SECURITY VIOLATION: PAYMENTS_ALLOW_INSECURE_WEBHOOKS=true en entorno "
            "no-desarrollo. Ignorando flag y forzando verificación real."
        )
        return False

    logger.warning(
        "DESARROLLO: Verificación de webhooks deshabilitada. "
        "Esto NUNCA debe ocurrir en producción."
    )
    return True


# =============================================================================
# HMAC CRUDO (canal de ingesta)
# =============================================================================

def verify_hmac_signature(
    raw_body: bytes,
    signature_header: Optional[str],
    secret: Optional[str],
) -> bool:
    """
    HMAC-SHA256 del body en hex, comparado en tiempo constante.

    Raises:
        MissingCredential: si falta el header o el secreto.
    """
    if not signature_header:
        raise MissingCredential("missing signature header")
    if not secret:
        raise MissingCredential("signing secret not configured")

    expected = hmac.new(secret.encode("utf-8"), msg=raw_body, digestmod=hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected.encode("ascii"), signature_header.strip().lower().encode("utf-8"))


# =============================================================================
# STRIPE
# =============================================================================

def _parse_stripe_header(signature_header: str) -> Dict[str, List[str]]:
    """Parsea "t=timestamp,v1=firma,v0=firma_antigua" en listas por clave."""
    elements: Dict[str, List[str]] = {}
    for item in signature_header.split(","):
        item = item.strip()
        if "=" in item:
            key, value = item.split("=", 1)
            elements.setdefault(key.strip(), []).append(value.strip())
    return elements


def verify_stripe_signature(
    raw_body: bytes,
    signature_header: Optional[str],
    secret: Optional[str],
    tolerance_seconds: int = 300,
    now: Optional[float] = None,
) -> bool:
    """
    Verifica la firma de un webhook de Stripe usando HMAC-SHA256.

    Args:
        raw_body: Body crudo del request
        signature_header: Header Stripe-Signature
        secret: Secret del webhook (whsec_...)
        tolerance_seconds: Tolerancia de timestamp (default 5 minutos)
        now: Epoch actual (inyectable en tests)

    Returns:
        True si alguna firma v1 coincide y el timestamp está en tolerancia.
        Un header malformado devuelve False.

    Raises:
        MissingCredential: si falta el header o el secreto.
    """
    if not signature_header:
        raise MissingCredential("missing Stripe-Signature header")
    if not secret:
        raise MissingCredential("STRIPE_WEBHOOK_SECRET not configured")

    elements = _parse_stripe_header(signature_header)
    timestamps = elements.get("t") or []
    signatures_v1 = elements.get("v1") or []

    if not timestamps or not signatures_v1:
        logger.warning("Stripe webhook rechazado: header sin t= o v1=")
        return False

    try:
        timestamp = int(timestamps[0])
    except ValueError:
        logger.warning("Stripe webhook rechazado: timestamp no numérico")
        return False

    current = int(time.time() if now is None else now)
    if abs(current - timestamp) > tolerance_seconds:
        logger.warning(
            "Stripe webhook rechazado: timestamp fuera de tolerancia "
            "(diferencia=%ss, tolerancia=%ss)",
            abs(current - timestamp), tolerance_seconds,
        )
        return False

    signed_payload = f"{timestamp}.".encode("utf-8") + raw_body
    expected = hmac.new(secret.encode("utf-8"), msg=signed_payload, digestmod=hashlib.sha256).hexdigest()

    for sig in signatures_v1:
        if hmac.compare_digest(expected.encode("ascii"), sig.encode("utf-8")):
            return True

    logger.warning("Stripe webhook rechazado: ninguna firma v1 coincide")
    return False


# =============================================================================
# PAYPAL (API oficial)
# =============================================================================

PAYPAL_TRANSMISSION_HEADERS = {
    "transmission_id": "paypal-transmission-id",
    "transmission_sig": "paypal-transmission-sig",
    "transmission_time": "paypal-transmission-time",
    "cert_url": "paypal-cert-url",
    "auth_algo": "paypal-auth-algo",
}


def get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Lectura case-insensitive (dict plano o Headers de Starlette)."""
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


async def verify_paypal_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    settings: PaymentsSettings,
    client: PayPalClient,
) -> bool:
    """
    Verifica un webhook de PayPal vía POST /v1/notifications/verify-webhook-signature.

    Returns:
        True solo si PayPal responde verification_status == "SUCCESS".

    Raises:
        MissingCredential: faltan headers de transmisión, webhook id o credenciales.
        VerificationUnavailable: timeout o 429/5xx tras un reintento.
    """
    transmission = {}
    for field, header_name in PAYPAL_TRANSMISSION_HEADERS.items():
        value = get_header(headers, header_name)
        if not value:
            raise MissingCredential(f"missing {header_name} header")
        transmission[field] = value

    if not settings.paypal_webhook_id:
        raise MissingCredential("PAYPAL_WEBHOOK_ID not configured")
    if not client.has_credentials:
        raise MissingCredential("PayPal client credentials not configured")

    try:
        raw_body.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("PayPal webhook rechazado: body no es UTF-8")
        return False

    try:
        status = await client.verify_webhook_signature(raw_body, transmission, settings.paypal_webhook_id)
    except PayPalApiError as e:
        logger.error("PayPal verify no disponible: %s", e)
        raise VerificationUnavailable(str(e)) from e

    if status == "SUCCESS":
        return True

    logger.warning("PayPal webhook rechazado: verification_status=%s", status)
    return False


__all__ = [
    "WebhookAuthError",
    "MissingCredential",
    "InvalidSignature",
    "VerificationUnavailable",
    "allow_insecure_webhooks",
    "get_header",
    "verify_hmac_signature",
    "verify_stripe_signature",
    "verify_paypal_signature",
    "PAYPAL_TRANSMISSION_HEADERS",
]

# Fin del archivo backend/app/modules/payments/services/webhooks/signature_verification.py
