# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/webhooks/__init__.py

Servicios relacionados con webhooks de pagos.

Autor: Vitrina
Fecha: 2026-09-08
"""

from .signature_verification import (
    WebhookAuthError,
    MissingCredential,
    InvalidSignature,
    VerificationUnavailable,
    allow_insecure_webhooks,
    get_header,
    verify_hmac_signature,
    verify_stripe_signature,
    verify_paypal_signature,
)

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
]

# Fin del archivo backend/app/modules/payments/services/webhooks/__init__.py
