# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/purchase_event_schemas.py

DTOs del flujo de webhooks:
- PurchaseEvent: evento normalizado, independiente del proveedor
- WebhookSkip: evento reconocido (2xx) pero que no se aplica al ledger
- WebhookResult: respuesta HTTP que produce el dispatcher

Autor: Vitrina
Fecha: 2026-09-09
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.modules.payments.enums import (
    PaymentProvider,
    PurchaseEventKind,
    PurchaseType,
    SkipReason,
)


class PurchaseEvent(BaseModel):
    """
    Intención de negocio extraída de un webhook verificado.

    Los eventos de ciclo de vida (renovación, cancelación, reembolso) solo
    necesitan provider + provider_reference; el trío de correlación
    (user_id, product_id, purchase_type) es obligatorio para
    PURCHASE_COMPLETED y lo garantiza el normalizador.
    """

    model_config = ConfigDict(frozen=True)

    kind: PurchaseEventKind
    provider: PaymentProvider
    provider_reference: str = Field(min_length=1)

    user_id: Optional[str] = None
    product_id: Optional[str] = None
    purchase_type: Optional[PurchaseType] = None
    amount_cents: Optional[int] = None

    raw_timestamp: Optional[str] = Field(
        default=None,
        description="Timestamp tal como lo envía el proveedor (epoch o ISO-8601)",
    )
    occurred_at: Optional[datetime] = Field(
        default=None,
        description="raw_timestamp parseado a datetime UTC",
    )

    payment_reference: Optional[str] = Field(
        default=None,
        description="Identificador secundario (Stripe payment_intent)",
    )
    checkout_reference: Optional[str] = Field(
        default=None,
        description="Checkout session id cuando la referencia primaria es la suscripción",
    )

    event_id: Optional[str] = None
    event_type: Optional[str] = None


class WebhookSkip(BaseModel):
    """Evento verificado que se reconoce sin tocar el ledger."""

    model_config = ConfigDict(frozen=True)

    reason: SkipReason
    provider: PaymentProvider
    event_type: Optional[str] = None
    event_id: Optional[str] = None
    detail: Optional[str] = None


class WebhookResult(BaseModel):
    """Resultado del dispatcher: código HTTP, cuerpo JSON y etapa alcanzada."""

    status_code: int
    body: Dict[str, Any]
    stage: str


__all__ = ["PurchaseEvent", "WebhookSkip", "WebhookResult"]

# Fin del archivo backend/app/modules/payments/schemas/purchase_event_schemas.py
