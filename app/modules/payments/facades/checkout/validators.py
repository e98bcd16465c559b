# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/checkout/validators.py

Validadores de negocio para el flujo de checkout.

Cada error lleva el código HTTP con el que la ruta debe responder.

Autor: Vitrina
Fecha: 2026-09-14
"""

from __future__ import annotations

from typing import Optional

from app.modules.catalog.models import Product
from app.modules.payments.enums import PaymentProvider, PurchaseType


class CheckoutValidationError(ValueError):
    """Error de validación de negocio en el flujo de checkout."""

    status_code = 400


class CheckoutProductNotFound(CheckoutValidationError):
    status_code = 404


class CheckoutPriceNotConfigured(CheckoutValidationError):
    """La serie no existe o no tiene precio (importe o stripe_price_id)."""


def parse_provider(value: str) -> PaymentProvider:
    try:
        return PaymentProvider(value.lower())
    except ValueError as e:
        raise CheckoutValidationError(f"Unsupported payment provider: {value}") from e


def parse_purchase_type(value: Optional[str]) -> PurchaseType:
    """Sin tipo explícito se asume compra única."""
    if not value:
        return PurchaseType.ONEOFF
    try:
        return PurchaseType(value.lower())
    except ValueError as e:
        raise CheckoutValidationError(f"Invalid purchase type: {value}") from e


def require_product_id(product_id: Optional[str]) -> str:
    if not product_id or not product_id.strip():
        raise CheckoutValidationError("Product ID required")
    return product_id.strip()


def require_product(product: Optional[Product], product_id: str) -> Product:
    if product is None:
        raise CheckoutProductNotFound(f"Product not found: {product_id}")
    return product


def resolve_amount_cents(product: Product, purchase_type: PurchaseType) -> int:
    """Precio a cobrar: el de la serie para suscripciones, el del producto si no."""
    if purchase_type is PurchaseType.SUBSCRIPTION:
        series = product.series
        if series is None or not series.price_cents:
            raise CheckoutPriceNotConfigured("Series price not configured for this product")
        return series.price_cents
    return product.price_cents


def require_stripe_price_id(product: Product) -> str:
    price_id = product.series.stripe_price_id if product.series is not None else None
    if not price_id:
        raise CheckoutPriceNotConfigured("Stripe price ID not configured for this series")
    return price_id


__all__ = [
    "CheckoutValidationError",
    "CheckoutProductNotFound",
    "CheckoutPriceNotConfigured",
    "parse_provider",
    "parse_purchase_type",
    "require_product_id",
    "require_product",
    "resolve_amount_cents",
    "require_stripe_price_id",
]

# Fin del archivo backend/app/modules/payments/facades/checkout/validators.py
