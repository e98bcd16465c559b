# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/__init__.py

Paquete de fachadas del módulo Payments.

Este __init__ NO importa submódulos; cada facade se importa desde su paquete:

    from app.modules.payments.facades.checkout import start_checkout
    from app.modules.payments.facades.webhooks import WebhookDispatcher

Autor: Vitrina
Fecha: 2026-09-14
"""

__all__: list[str] = []

# Fin del archivo backend/app/modules/payments/facades/__init__.py
