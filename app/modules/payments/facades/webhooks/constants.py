# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/webhooks/constants.py

Constantes para webhooks Stripe/PayPal.
"""

# Stripe: checkout pagado (payment_status aceptados)
STRIPE_PAID_CHECKOUT_STATUSES = frozenset({"paid", "no_payment_required"})

# Claves de metadata del trío de correlación (camelCase y snake_case)
STRIPE_PRODUCT_KEYS = ("productId", "product_id")
STRIPE_USER_KEYS = ("userId", "user_id")
STRIPE_TYPE_KEYS = ("type", "purchase_type")

# PayPal: custom_id = "type:productId:userId"
PAYPAL_CUSTOM_ID_SEPARATOR = ":"
PAYPAL_CUSTOM_ID_PARTS = 3

# Preflight CORS de los endpoints de webhook
WEBHOOK_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}

__all__ = [
    "STRIPE_PAID_CHECKOUT_STATUSES",
    "STRIPE_PRODUCT_KEYS", "STRIPE_USER_KEYS", "STRIPE_TYPE_KEYS",
    "PAYPAL_CUSTOM_ID_SEPARATOR", "PAYPAL_CUSTOM_ID_PARTS",
    "WEBHOOK_CORS_HEADERS",
]
