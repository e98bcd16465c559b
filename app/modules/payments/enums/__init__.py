# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/__init__.py

Superficie de exportación de enums del módulo Payments.

Autor: Vitrina
Fecha: 2026-09-04
"""

from .payment_provider_enum import PaymentProvider
from .purchase_status_enum import PurchaseStatus, ACCESS_GRANTING_STATUSES
from .purchase_type_enum import PurchaseType
from .purchase_event_enum import PurchaseEventKind, SkipReason, LedgerOutcome
from .provider_event_type_enum import StripeEventType, PayPalEventType

__all__ = [
    "PaymentProvider",
    "PurchaseStatus",
    "ACCESS_GRANTING_STATUSES",
    "PurchaseType",
    "PurchaseEventKind",
    "SkipReason",
    "LedgerOutcome",
    "StripeEventType",
    "PayPalEventType",
]

# Fin del archivo backend/app/modules/payments/enums/__init__.py
