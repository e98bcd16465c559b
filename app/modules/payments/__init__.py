# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/__init__.py

Módulo de pagos de Vitrina.

Este módulo gestiona:
- Checkout con Stripe y PayPal
- Recepción, verificación y normalización de webhooks
- Ledger idempotente de compras (tabla purchases)
- Resolución de acceso a productos comprados

Estructura:
- enums: proveedores, estados y tipos de evento
- models: modelo ORM Purchase
- repositories: escrituras condicionales sobre purchases
- services: ledger, acceso, cliente PayPal y verificación de firmas
- facades: checkout y dispatcher de webhooks
- routes: endpoints HTTP

Solo los enums se re-exportan aquí; el resto se importa desde su
subpaquete para no cargar ORM ni SDKs al importar el módulo.

Autor: Vitrina
Fecha: 2026-09-05
"""

from .enums import (
    PaymentProvider,
    PurchaseStatus,
    PurchaseType,
    PurchaseEventKind,
    LedgerOutcome,
)

__all__ = [
    "PaymentProvider",
    "PurchaseStatus",
    "PurchaseType",
    "PurchaseEventKind",
    "LedgerOutcome",
]

# Fin del archivo backend/app/modules/payments/__init__.py
