# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/payment_provider_enum.py

Enum de proveedores de pago soportados.
Se persiste como ENUM `payment_provider_enum`.

Autor: Vitrina
Fecha: 2026-09-04
"""

from enum import StrEnum


class PaymentProvider(StrEnum):
    """Proveedor de pago externo."""

    STRIPE = "stripe"
    PAYPAL = "paypal"

    __db_enum_name__ = "payment_provider_enum"


__all__ = ["PaymentProvider"]

# Fin del archivo backend/app/modules/payments/enums/payment_provider_enum.py
