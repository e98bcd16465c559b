# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/__init__.py

Superficie de exportación de servicios del módulo Payments.

Incluye:
- EntitlementLedger (escritor único de purchases)
- AccessService / has_access (resolvedor de acceso)
- PayPalClient (REST API de PayPal)

Autor: Vitrina
Fecha: 2026-09-12
"""

from .paypal_client import PayPalClient, PayPalApiError
from .ledger_service import (
    EntitlementLedger,
    LedgerError,
    StorageFailure,
    CatalogLookupFailed,
)
from .access_service import AccessService, has_access

__all__ = [
    "PayPalClient",
    "PayPalApiError",
    "EntitlementLedger",
    "LedgerError",
    "StorageFailure",
    "CatalogLookupFailed",
    "AccessService",
    "has_access",
]

# Fin del archivo backend/app/modules/payments/services/__init__.py
