# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/checkout_schemas.py

Esquemas Pydantic del inicio de checkout (Stripe / PayPal) y de la
consulta de acceso.

Autor: Vitrina
Fecha: 2026-09-09
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from app.modules.payments.enums import PaymentProvider, PurchaseType


class ProviderCheckoutInfo(BaseModel):
    """Lo que devuelve el proveedor al crear la sesión u orden."""

    provider_session_id: Optional[str] = Field(
        default=None,
        description="Checkout session id (Stripe) u order id (PayPal).",
    )
    redirect_url: str = Field(description="URL a la que debe redirigirse el usuario.")


class CheckoutResponse(BaseModel):
    url: str = Field(description="URL de pago del proveedor.")
    provider: PaymentProvider
    purchase_type: PurchaseType
    provider_session_id: Optional[str] = None


class AccessResponse(BaseModel):
    product_id: str
    has_access: bool


__all__ = [
    "ProviderCheckoutInfo",
    "CheckoutResponse",
    "AccessResponse",
]

# Fin del archivo backend/app/modules/payments/schemas/checkout_schemas.py
