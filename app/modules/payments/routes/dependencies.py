# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/dependencies.py

Dependencias FastAPI que leen los componentes construidos en el arranque
(lifespan) desde app.state.

Autor: Vitrina
Fecha: 2026-09-15
"""

from __future__ import annotations

from fastapi import Request

from app.modules.payments.facades.webhooks import WebhookDispatcher
from app.modules.payments.services.paypal_client import PayPalClient
from app.shared.config.settings_payments import PaymentsSettings


def get_stripe_dispatcher(request: Request) -> WebhookDispatcher:
    return request.app.state.stripe_dispatcher


def get_paypal_dispatcher(request: Request) -> WebhookDispatcher:
    return request.app.state.paypal_dispatcher


def get_app_payments_settings(request: Request) -> PaymentsSettings:
    return request.app.state.payments_settings


def get_paypal_client(request: Request) -> PayPalClient:
    return request.app.state.paypal_client


__all__ = [
    "get_stripe_dispatcher",
    "get_paypal_dispatcher",
    "get_app_payments_settings",
    "get_paypal_client",
]

# Fin del archivo backend/app/modules/payments/routes/dependencies.py
