# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/purchase_status_enum.py

Estados de una compra en el ledger.

    paid      -> compra única cobrada (solo puede pasar a refunded)
    active    -> suscripción vigente (puede pasar a canceled o refunded)
    canceled  -> absorbente salvo reembolso
    refunded  -> absorbente

Autor: Vitrina
Fecha: 2026-09-04
"""

from enum import StrEnum


class PurchaseStatus(StrEnum):
    PAID = "paid"
    ACTIVE = "active"
    CANCELED = "canceled"
    REFUNDED = "refunded"

    __db_enum_name__ = "purchase_status_enum"


ACCESS_GRANTING_STATUSES = frozenset({PurchaseStatus.PAID, PurchaseStatus.ACTIVE})


__all__ = ["PurchaseStatus", "ACCESS_GRANTING_STATUSES"]

# Fin del archivo backend/app/modules/payments/enums/purchase_status_enum.py
