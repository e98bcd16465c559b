# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/ledger_service.py

Ledger de derechos de acceso (tabla purchases).

Aplica un PurchaseEvent de forma idempotente:
- PURCHASE_COMPLETED  -> alta (paid / active) dentro de SAVEPOINT;
                         duplicado -> ALREADY_RECORDED
- SUBSCRIPTION_RENEWED  -> active  desde {active} (solo suscripciones)
- SUBSCRIPTION_CANCELED -> canceled desde {active, paid}
- REFUNDED              -> refunded desde {paid, active, canceled},
                           casando provider_reference o payment_reference

Los estados canceled/refunded son absorbentes. Las transiciones son
UPDATE condicionales, atómicos frente a entregas concurrentes.

El ledger confirma (commit) al terminar bien y revierte ante cualquier
error de almacenamiento, que se propaga como StorageFailure.

Autor: Vitrina
Fecha: 2026-09-12
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.catalog.repositories import CatalogRepository
from app.modules.payments.enums import (
    LedgerOutcome,
    PurchaseEventKind,
    PurchaseStatus,
    PurchaseType,
)
from app.modules.payments.metrics.exporters.prometheus_exporter import observe_amount_mismatch
from app.modules.payments.models import Purchase
from app.modules.payments.repositories import PurchaseRepository
from app.modules.payments.schemas import PurchaseEvent

logger = logging.getLogger(__name__)

DEFAULT_PRICE_TOLERANCE_CENTS = 1


# =============================================================================
# ERRORES
# =============================================================================

class LedgerError(Exception):
    """Error al aplicar un evento; el proveedor debe reintentar."""


class StorageFailure(LedgerError):
    """La base de datos no pudo completar la operación."""


class CatalogLookupFailed(LedgerError):
    """El producto referenciado por la compra no existe en el catálogo."""


# =============================================================================
# REGLAS DE TRANSICIÓN
# =============================================================================

@dataclass(frozen=True)
class StatusTransition:
    target: PurchaseStatus
    sources: FrozenSet[PurchaseStatus]
    purchase_type: Optional[PurchaseType] = None
    match_payment_reference: bool = False


TRANSITIONS = {
    PurchaseEventKind.SUBSCRIPTION_RENEWED: StatusTransition(
        target=PurchaseStatus.ACTIVE,
        sources=frozenset({PurchaseStatus.ACTIVE}),
        purchase_type=PurchaseType.SUBSCRIPTION,
    ),
    PurchaseEventKind.SUBSCRIPTION_CANCELED: StatusTransition(
        target=PurchaseStatus.CANCELED,
        sources=frozenset({PurchaseStatus.ACTIVE}),
        purchase_type=PurchaseType.SUBSCRIPTION,
    ),
    PurchaseEventKind.REFUNDED: StatusTransition(
        target=PurchaseStatus.REFUNDED,
        sources=frozenset({PurchaseStatus.PAID, PurchaseStatus.ACTIVE, PurchaseStatus.CANCELED}),
        match_payment_reference=True,
    ),
}


def initial_status(purchase_type: PurchaseType) -> PurchaseStatus:
    if purchase_type is PurchaseType.SUBSCRIPTION:
        return PurchaseStatus.ACTIVE
    return PurchaseStatus.PAID


# =============================================================================
# LEDGER
# =============================================================================

class EntitlementLedger:
    """Escritor único de la tabla purchases."""

    def __init__(
        self,
        purchase_repo: PurchaseRepository | None = None,
        catalog_repo: CatalogRepository | None = None,
        price_tolerance_cents: int = DEFAULT_PRICE_TOLERANCE_CENTS,
    ) -> None:
        self.purchase_repo = purchase_repo or PurchaseRepository()
        self.catalog_repo = catalog_repo or CatalogRepository()
        self.price_tolerance_cents = price_tolerance_cents

    async def apply_event(self, session: AsyncSession, event: PurchaseEvent) -> LedgerOutcome:
        """
        Aplica el evento y confirma la transacción.

        Raises:
            CatalogLookupFailed: producto inexistente en una compra nueva.
            StorageFailure: cualquier error de base de datos.
        """
        try:
            if event.kind is PurchaseEventKind.PURCHASE_COMPLETED:
                outcome = await self._record_purchase(session, event)
            else:
                outcome = await self._apply_transition(session, event, TRANSITIONS[event.kind])
            await session.commit()
        except CatalogLookupFailed:
            await session.rollback()
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(
                "[ledger] Error de almacenamiento %s %s/%s: %s",
                event.kind.value, event.provider.value, event.provider_reference, e,
            )
            raise StorageFailure(str(e)) from e

        logger.info(
            "[ledger] %s %s/%s -> %s",
            event.kind.value, event.provider.value, event.provider_reference, outcome.value,
        )
        return outcome

    # -------------------------------------------------------------------------
    # Alta
    # -------------------------------------------------------------------------
    async def _record_purchase(self, session: AsyncSession, event: PurchaseEvent) -> LedgerOutcome:
        if not event.user_id or not event.product_id or event.purchase_type is None:
            raise ValueError("purchase_completed requires user_id, product_id and purchase_type")

        existing = await self.purchase_repo.get_by_reference(
            session, event.provider, event.provider_reference
        )
        if existing is not None:
            return LedgerOutcome.ALREADY_RECORDED

        product = await self.catalog_repo.get_product(session, event.product_id)
        if product is None:
            logger.error(
                "[ledger] Producto %s no encontrado para %s/%s",
                event.product_id, event.provider.value, event.provider_reference,
            )
            raise CatalogLookupFailed(f"product {event.product_id} not found")

        if event.purchase_type is PurchaseType.ONEOFF and event.amount_cents is not None:
            self._check_price(event, product.price_cents)

        purchase = Purchase(
            provider=event.provider,
            provider_reference=event.provider_reference,
            user_id=event.user_id,
            product_id=event.product_id,
            purchase_type=event.purchase_type,
            amount_cents=event.amount_cents or 0,
            status=initial_status(event.purchase_type),
            payment_reference=event.payment_reference,
            checkout_reference=event.checkout_reference,
            last_event_at=event.occurred_at,
        )
        try:
            await self.purchase_repo.insert_in_savepoint(session, purchase)
        except IntegrityError:
            # Otra entrega concurrente ganó la carrera
            logger.info(
                "[ledger] Violación de unicidad %s/%s: ya registrada",
                event.provider.value, event.provider_reference,
            )
            return LedgerOutcome.ALREADY_RECORDED
        return LedgerOutcome.RECORDED

    def _check_price(self, event: PurchaseEvent, expected_cents: int) -> None:
        actual = event.amount_cents or 0
        if abs(actual - expected_cents) <= self.price_tolerance_cents:
            return
        observe_amount_mismatch(event.provider.value)
        logger.warning(
            "pricing_integrity_warning",
            extra={
                "event": "pricing_integrity_warning",
                "provider": event.provider.value,
                "provider_reference": event.provider_reference,
                "product_id": event.product_id,
                "expected_cents": expected_cents,
                "actual_cents": actual,
            },
        )

    # -------------------------------------------------------------------------
    # Transiciones
    # -------------------------------------------------------------------------
    async def _apply_transition(
        self,
        session: AsyncSession,
        event: PurchaseEvent,
        transition: StatusTransition,
    ) -> LedgerOutcome:
        affected = await self.purchase_repo.transition_status(
            session,
            provider=event.provider,
            reference=event.provider_reference,
            target=transition.target,
            sources=transition.sources,
            occurred_at=event.occurred_at,
            purchase_type=transition.purchase_type,
            match_payment_reference=transition.match_payment_reference,
        )
        if affected:
            # Renovación de una suscripción activa: solo se refresca last_event_at
            if transition.target in transition.sources:
                return LedgerOutcome.UNCHANGED
            return LedgerOutcome.UPDATED

        if transition.match_payment_reference:
            rows = await self.purchase_repo.find_by_any_reference(
                session, event.provider, event.provider_reference
            )
        else:
            row = await self.purchase_repo.get_by_reference(
                session, event.provider, event.provider_reference
            )
            rows = [row] if row is not None else []

        if not rows:
            logger.warning(
                "[ledger] %s sin compra previa %s/%s",
                event.kind.value, event.provider.value, event.provider_reference,
            )
            return LedgerOutcome.NOT_FOUND

        if any(r.status == transition.target for r in rows):
            return LedgerOutcome.UNCHANGED

        logger.warning(
            "[ledger] %s descartado %s/%s (estados=%s)",
            event.kind.value,
            event.provider.value,
            event.provider_reference,
            ",".join(sorted(r.status.value for r in rows)),
        )
        return LedgerOutcome.DISCARDED


__all__ = [
    "EntitlementLedger",
    "LedgerError",
    "StorageFailure",
    "CatalogLookupFailed",
    "StatusTransition",
    "TRANSITIONS",
    "initial_status",
]

# Fin del archivo backend/app/modules/payments/services/ledger_service.py
