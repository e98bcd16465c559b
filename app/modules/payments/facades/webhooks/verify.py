# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/webhooks/verify.py

Fachada de verificación de firmas para webhooks de Stripe y PayPal.

Cada verificador se construye una vez en el arranque con sus settings
(y el cliente PayPal) y expone `await verify(raw_body, headers)`, que
no devuelve nada si la firma es válida y lanza en caso contrario.

IMPORTANTE:
- En producción se requiere verificación REAL de firmas.
- El bypass inseguro SOLO funciona en desarrollo (ver allow_insecure_webhooks).

Autor: Vitrina
Fecha: 2026-09-13
"""
from __future__ import annotations

import logging
from typing import Mapping, Optional, Protocol

from app.modules.payments.enums import PaymentProvider
from app.modules.payments.services.paypal_client import PayPalClient
from app.modules.payments.services.webhooks.signature_verification import (
    InvalidSignature,
    allow_insecure_webhooks,
    get_header,
    verify_hmac_signature,
    verify_paypal_signature,
    verify_stripe_signature,
)
from app.shared.config.settings_payments import PaymentsSettings

logger = logging.getLogger(__name__)

STRIPE_SIGNATURE_HEADER = "stripe-signature"
INGEST_SIGNATURE_HEADER = "x-hmac-signature"


class WebhookVerifier(Protocol):
    provider: PaymentProvider

    async def verify(self, raw_body: bytes, headers: Mapping[str, str]) -> None: ...


class StripeWebhookVerifier:
    """Stripe-Signature (t=...,v1=...) contra STRIPE_WEBHOOK_SECRET."""

    provider = PaymentProvider.STRIPE

    def __init__(self, settings: PaymentsSettings) -> None:
        self.settings = settings

    async def verify(self, raw_body: bytes, headers: Mapping[str, str]) -> None:
        if allow_insecure_webhooks(self.settings):
            return
        valid = verify_stripe_signature(
            raw_body,
            get_header(headers, STRIPE_SIGNATURE_HEADER),
            self.settings.stripe_webhook_secret,
            tolerance_seconds=self.settings.stripe_webhook_tolerance_seconds,
        )
        if not valid:
            raise InvalidSignature("invalid Stripe signature")


class PayPalWebhookVerifier:
    """Verificación remota vía API de PayPal (requiere red)."""

    provider = PaymentProvider.PAYPAL

    def __init__(self, settings: PaymentsSettings, client: PayPalClient) -> None:
        self.settings = settings
        self.client = client

    async def verify(self, raw_body: bytes, headers: Mapping[str, str]) -> None:
        if allow_insecure_webhooks(self.settings):
            return
        if not await verify_paypal_signature(raw_body, headers, self.settings, self.client):
            raise InvalidSignature("invalid PayPal signature")


def ensure_hmac_signature(raw_body: bytes, headers: Mapping[str, str], secret: Optional[str]) -> None:
    """
    Canal de ingesta: x-hmac-signature = hex(HMAC-SHA256(secret, body)).

    Raises:
        MissingCredential: falta header o secreto.
        InvalidSignature: la firma no coincide.
    """
    if not verify_hmac_signature(raw_body, get_header(headers, INGEST_SIGNATURE_HEADER), secret):
        raise InvalidSignature("invalid HMAC signature")


__all__ = [
    "WebhookVerifier",
    "StripeWebhookVerifier",
    "PayPalWebhookVerifier",
    "ensure_hmac_signature",
    "STRIPE_SIGNATURE_HEADER",
    "INGEST_SIGNATURE_HEADER",
]

# Fin del archivo backend/app/modules/payments/facades/webhooks/verify.py
