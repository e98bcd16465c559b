# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/purchase_repository.py

Repositorio para la tabla purchases.

Responsabilidades:
- Búsqueda por clave de idempotencia (provider, provider_reference)
- Alta dentro de SAVEPOINT (la violación de unicidad la resuelve el ledger)
- Transiciones de estado condicionales (UPDATE ... WHERE status IN ...)
- Consulta EXISTS para el resolvedor de acceso

Autor: Vitrina
Fecha: 2026-09-12
"""

from datetime import datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy import exists, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.payments.enums import (
    ACCESS_GRANTING_STATUSES,
    PaymentProvider,
    PurchaseStatus,
    PurchaseType,
)
from app.modules.payments.models import Purchase


class PurchaseRepository(BaseRepository[Purchase]):
    def __init__(self) -> None:
        super().__init__(Purchase)

    # -----------------------------------------------------------
    # Búsquedas
    # -----------------------------------------------------------
    async def get_by_reference(
        self,
        session: AsyncSession,
        provider: PaymentProvider,
        provider_reference: str,
    ) -> Optional[Purchase]:
        stmt = (
            select(Purchase)
            .where(
                Purchase.provider == provider,
                Purchase.provider_reference == provider_reference,
            )
        )
        return await self.first(session, stmt, fresh=True)

    async def find_by_any_reference(
        self,
        session: AsyncSession,
        provider: PaymentProvider,
        reference: str,
    ) -> Sequence[Purchase]:
        """Filas cuyo provider_reference o payment_reference coinciden."""
        stmt = (
            select(Purchase)
            .where(
                Purchase.provider == provider,
                or_(
                    Purchase.provider_reference == reference,
                    Purchase.payment_reference == reference,
                ),
            )
        )
        return await self.all(session, stmt, fresh=True)

    # -----------------------------------------------------------
    # Escritura
    # -----------------------------------------------------------
    async def insert_in_savepoint(self, session: AsyncSession, purchase: Purchase) -> Purchase:
        """
        Inserta dentro de un SAVEPOINT.

        Raises:
            IntegrityError: si (provider, provider_reference) ya existe; el
            SAVEPOINT se revierte y la transacción externa sigue usable.
        """
        async with session.begin_nested():
            session.add(purchase)
        return purchase

    async def transition_status(
        self,
        session: AsyncSession,
        *,
        provider: PaymentProvider,
        reference: str,
        target: PurchaseStatus,
        sources: Iterable[PurchaseStatus],
        occurred_at: Optional[datetime] = None,
        purchase_type: Optional[PurchaseType] = None,
        match_payment_reference: bool = False,
    ) -> int:
        """
        Cambia el estado solo si la fila está en uno de `sources`.

        Si `occurred_at` viene informado, las filas con un last_event_at
        posterior no se tocan (evento atrasado). Devuelve filas afectadas.
        """
        if match_payment_reference:
            ref_clause = or_(
                Purchase.provider_reference == reference,
                Purchase.payment_reference == reference,
            )
        else:
            ref_clause = Purchase.provider_reference == reference

        stmt = update(Purchase).where(
            Purchase.provider == provider,
            ref_clause,
            Purchase.status.in_(list(sources)),
        )
        if purchase_type is not None:
            stmt = stmt.where(Purchase.purchase_type == purchase_type)

        values = {"status": target, "updated_at": func.now()}
        if occurred_at is not None:
            stmt = stmt.where(
                or_(Purchase.last_event_at.is_(None), Purchase.last_event_at <= occurred_at)
            )
            values["last_event_at"] = occurred_at

        stmt = stmt.values(**values).execution_options(synchronize_session=False)
        result = await session.execute(stmt)
        return result.rowcount or 0

    # -----------------------------------------------------------
    # Acceso
    # -----------------------------------------------------------
    async def has_granting_purchase(
        self,
        session: AsyncSession,
        user_id: str,
        product_id: str,
    ) -> bool:
        stmt = select(
            exists().where(
                Purchase.user_id == user_id,
                Purchase.product_id == product_id,
                Purchase.status.in_(list(ACCESS_GRANTING_STATUSES)),
            )
        )
        result = await session.execute(stmt)
        return bool(result.scalar())

# Fin del archivo backend/app/modules/payments/repositories/purchase_repository.py
