# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/enums/purchase_event_enum.py

Enums del flujo de webhooks:
- PurchaseEventKind: intención de negocio normalizada
- SkipReason: por qué un evento se reconoce (2xx) sin aplicarse
- LedgerOutcome: resultado de aplicar un evento al ledger

Autor: Vitrina
Fecha: 2026-09-04
"""

from enum import StrEnum


class PurchaseEventKind(StrEnum):
    PURCHASE_COMPLETED = "purchase_completed"
    SUBSCRIPTION_RENEWED = "subscription_renewed"
    SUBSCRIPTION_CANCELED = "subscription_canceled"
    REFUNDED = "refunded"


class SkipReason(StrEnum):
    UNHANDLED = "unhandled"      # tipo de evento que no nos interesa
    MALFORMED = "malformed"      # faltan campos de correlación o monto ilegible
    INCOMPLETE = "incomplete"    # checkout aún no pagado


class LedgerOutcome(StrEnum):
    RECORDED = "recorded"
    ALREADY_RECORDED = "already_recorded"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    NOT_FOUND = "not_found"
    DISCARDED = "discarded"


__all__ = ["PurchaseEventKind", "SkipReason", "LedgerOutcome"]

# Fin del archivo backend/app/modules/payments/enums/purchase_event_enum.py
