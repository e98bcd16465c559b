# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/checkout/__init__.py

Punto de entrada del submódulo de checkout del módulo Payments.

Autor: Vitrina
Fecha: 2026-09-14
"""

from .validators import (
    CheckoutValidationError,
    CheckoutProductNotFound,
    CheckoutPriceNotConfigured,
)
from .provider_sessions import ProviderSessionError, create_provider_checkout_session
from .start_checkout import start_checkout

__all__ = [
    "CheckoutValidationError",
    "CheckoutProductNotFound",
    "CheckoutPriceNotConfigured",
    "ProviderSessionError",
    "create_provider_checkout_session",
    "start_checkout",
]

# Fin del archivo backend/app/modules/payments/facades/checkout/__init__.py
