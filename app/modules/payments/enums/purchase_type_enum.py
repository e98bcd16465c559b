# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/purchase_type_enum.py

Tipo de compra: pago único o suscripción recurrente.

Autor: Vitrina
Fecha: 2026-09-04
"""

from enum import StrEnum


class PurchaseType(StrEnum):
    ONEOFF = "oneoff"
    SUBSCRIPTION = "subscription"

    __db_enum_name__ = "purchase_type_enum"


__all__ = ["PurchaseType"]

# Fin del archivo backend/app/modules/payments/enums/purchase_type_enum.py
