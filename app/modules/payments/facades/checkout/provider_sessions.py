# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/checkout/provider_sessions.py

Creación de sesiones de checkout por proveedor.

- Stripe: Checkout Session (stripe-python, ejecutado en threadpool).
  Compra única con price_data en línea; suscripción con el
  stripe_price_id de la serie.
- PayPal: orden CAPTURE vía REST API, con custom_id "type:productId:userId".

En ambos casos se adjunta el trío de correlación (producto, usuario, tipo)
que luego leen los webhooks.

Autor: Vitrina
Fecha: 2026-09-14
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import stripe
from fastapi.concurrency import run_in_threadpool

from app.modules.catalog.models import Product
from app.modules.payments.enums import PaymentProvider, PurchaseType
from app.modules.payments.facades.webhooks.constants import PAYPAL_CUSTOM_ID_SEPARATOR
from app.modules.payments.schemas import ProviderCheckoutInfo
from app.modules.payments.services.paypal_client import PayPalApiError, PayPalClient
from app.shared.config.settings_payments import PaymentsSettings
from .validators import require_stripe_price_id, resolve_amount_cents

logger = logging.getLogger(__name__)


class ProviderSessionError(Exception):
    """El proveedor no pudo crear la sesión de pago (HTTP 502)."""


def format_decimal_amount(amount_cents: int) -> str:
    """1999 -> "19.99" (formato de montos de PayPal)."""
    return f"{amount_cents // 100}.{amount_cents % 100:02d}"


def build_paypal_custom_id(purchase_type: PurchaseType, product_id: str, user_id: str) -> str:
    return PAYPAL_CUSTOM_ID_SEPARATOR.join((purchase_type.value, product_id, user_id))


# =============================================================================
# STRIPE
# =============================================================================

def build_stripe_session_params(
    *,
    settings: PaymentsSettings,
    product: Product,
    purchase_type: PurchaseType,
    user_id: str,
    customer_email: Optional[str] = None,
) -> Dict[str, Any]:
    metadata = {
        "productId": product.id,
        "userId": user_id,
        "type": purchase_type.value,
    }
    if purchase_type is PurchaseType.SUBSCRIPTION:
        params: Dict[str, Any] = {
            "mode": "subscription",
            "line_items": [{"price": require_stripe_price_id(product), "quantity": 1}],
            # Las facturas de renovación no llevan la metadata de la sesión
            "subscription_data": {"metadata": metadata},
        }
    else:
        params = {
            "mode": "payment",
            "line_items": [
                {
                    "price_data": {
                        "currency": settings.stripe_currency,
                        "product_data": {"name": product.title},
                        "unit_amount": product.price_cents,
                    },
                    "quantity": 1,
                }
            ],
        }

    params.update(
        success_url=settings.stripe_success_url,
        cancel_url=settings.cancel_url,
        metadata=metadata,
        client_reference_id=user_id,
    )
    if customer_email:
        params["customer_email"] = customer_email
    return params


async def create_stripe_checkout_session(
    *,
    settings: PaymentsSettings,
    product: Product,
    purchase_type: PurchaseType,
    user_id: str,
    customer_email: Optional[str] = None,
) -> ProviderCheckoutInfo:
    if not settings.stripe_secret_key:
        raise ProviderSessionError("STRIPE_SECRET_KEY not configured")

    params = build_stripe_session_params(
        settings=settings,
        product=product,
        purchase_type=purchase_type,
        user_id=user_id,
        customer_email=customer_email,
    )
    try:
        session = await run_in_threadpool(
            stripe.checkout.Session.create,
            api_key=settings.stripe_secret_key,
            **params,
        )
    except stripe.StripeError as e:
        logger.error("Stripe checkout error product=%s user=%s: %s", product.id, user_id, e)
        raise ProviderSessionError("Stripe checkout session could not be created") from e

    logger.info(
        "Stripe checkout session creada: session_id=%s product=%s type=%s",
        session.id, product.id, purchase_type.value,
    )
    return ProviderCheckoutInfo(provider_session_id=session.id, redirect_url=session.url)


# =============================================================================
# PAYPAL
# =============================================================================

def build_paypal_order_payload(
    *,
    settings: PaymentsSettings,
    product: Product,
    purchase_type: PurchaseType,
    user_id: str,
) -> Dict[str, Any]:
    amount_cents = resolve_amount_cents(product, purchase_type)
    label = "Subscription" if purchase_type is PurchaseType.SUBSCRIPTION else "Purchase"
    return {
        "intent": "CAPTURE",
        "purchase_units": [
            {
                "amount": {
                    "currency_code": settings.paypal_currency,
                    "value": format_decimal_amount(amount_cents),
                },
                "description": f"{label}: {product.title}",
                "custom_id": build_paypal_custom_id(purchase_type, product.id, user_id),
            }
        ],
        "application_context": {
            "return_url": settings.paypal_return_url,
            "cancel_url": settings.cancel_url,
        },
    }


async def create_paypal_checkout_session(
    *,
    settings: PaymentsSettings,
    client: PayPalClient,
    product: Product,
    purchase_type: PurchaseType,
    user_id: str,
) -> ProviderCheckoutInfo:
    payload = build_paypal_order_payload(
        settings=settings,
        product=product,
        purchase_type=purchase_type,
        user_id=user_id,
    )
    try:
        order = await client.create_order(payload)
    except PayPalApiError as e:
        logger.error("PayPal checkout error product=%s user=%s: %s", product.id, user_id, e)
        raise ProviderSessionError("PayPal order could not be created") from e

    approval_url = next(
        (link.get("href") for link in order.get("links", []) if link.get("rel") == "approve"),
        None,
    )
    if not approval_url:
        raise ProviderSessionError("No approval URL from PayPal")

    logger.info(
        "PayPal order creada: order_id=%s product=%s type=%s",
        order.get("id"), product.id, purchase_type.value,
    )
    return ProviderCheckoutInfo(provider_session_id=order.get("id"), redirect_url=approval_url)


async def create_provider_checkout_session(
    *,
    provider: PaymentProvider,
    settings: PaymentsSettings,
    paypal_client: PayPalClient,
    product: Product,
    purchase_type: PurchaseType,
    user_id: str,
    customer_email: Optional[str] = None,
) -> ProviderCheckoutInfo:
    """Punto de entrada unificado por proveedor."""
    if provider is PaymentProvider.STRIPE:
        return await create_stripe_checkout_session(
            settings=settings,
            product=product,
            purchase_type=purchase_type,
            user_id=user_id,
            customer_email=customer_email,
        )
    return await create_paypal_checkout_session(
        settings=settings,
        client=paypal_client,
        product=product,
        purchase_type=purchase_type,
        user_id=user_id,
    )


__all__ = [
    "ProviderSessionError",
    "format_decimal_amount",
    "build_paypal_custom_id",
    "build_stripe_session_params",
    "build_paypal_order_payload",
    "create_stripe_checkout_session",
    "create_paypal_checkout_session",
    "create_provider_checkout_session",
]

# Fin del archivo backend/app/modules/payments/facades/checkout/provider_sessions.py
