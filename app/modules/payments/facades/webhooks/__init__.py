# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/webhooks/__init__.py

Exporta las piezas del flujo de webhooks: verificación, normalización
y dispatcher.

Autor: Vitrina
Fecha: 2026-09-13
"""

from .normalize import (
    NormalizationResult,
    WebhookPayloadError,
    parse_event_body,
    normalize_event,
    normalize_stripe_event,
    normalize_paypal_event,
)
from .verify import (
    WebhookVerifier,
    StripeWebhookVerifier,
    PayPalWebhookVerifier,
    ensure_hmac_signature,
)
from .dispatcher import WebhookDispatcher
from .constants import WEBHOOK_CORS_HEADERS

__all__ = [
    "NormalizationResult",
    "WebhookPayloadError",
    "parse_event_body",
    "normalize_event",
    "normalize_stripe_event",
    "normalize_paypal_event",
    "WebhookVerifier",
    "StripeWebhookVerifier",
    "PayPalWebhookVerifier",
    "ensure_hmac_signature",
    "WebhookDispatcher",
    "WEBHOOK_CORS_HEADERS",
]

# Fin del archivo backend/app/modules/payments/facades/webhooks/__init__.py
