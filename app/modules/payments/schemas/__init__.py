# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/__init__.py

Autor: Vitrina
Fecha: 2026-09-09
"""

from .purchase_event_schemas import PurchaseEvent, WebhookSkip, WebhookResult
from .checkout_schemas import ProviderCheckoutInfo, CheckoutResponse, AccessResponse

__all__ = [
    "PurchaseEvent",
    "WebhookSkip",
    "WebhookResult",
    "ProviderCheckoutInfo",
    "CheckoutResponse",
    "AccessResponse",
]

# Fin del archivo backend/app/modules/payments/schemas/__init__.py
