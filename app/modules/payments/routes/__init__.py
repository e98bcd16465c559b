# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/__init__.py

Ensamblador de rutas REST del módulo Payments.

Incluye:
- /payments/checkout/{provider}
- /payments/access/{product_id}
- /payments/webhooks/stripe
- /payments/webhooks/paypal

Autor: Vitrina
Fecha: 2026-09-15
"""

from fastapi import APIRouter

from .checkout import router as checkout_router
from .access import router as access_router
from .webhooks_stripe import router as webhooks_stripe_router
from .webhooks_paypal import router as webhooks_paypal_router

router = APIRouter()

# Prefijo común /payments para todas las rutas del módulo
router.include_router(checkout_router, prefix="/payments")
router.include_router(access_router, prefix="/payments")
router.include_router(webhooks_stripe_router, prefix="/payments")
router.include_router(webhooks_paypal_router, prefix="/payments")

__all__ = ["router"]

# Fin del archivo backend/app/modules/payments/routes/__init__.py
