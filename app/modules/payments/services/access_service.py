# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/access_service.py

Resolvedor de acceso: ¿el usuario tiene una compra vigente del producto?

Una compra concede acceso mientras su estado sea paid o active.
Sin usuario (visitante anónimo) la respuesta es False sin consultar la BD.

Autor: Vitrina
Fecha: 2026-09-12
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.repositories import PurchaseRepository

logger = logging.getLogger(__name__)


class AccessService:
    def __init__(self, purchase_repo: PurchaseRepository | None = None) -> None:
        self.purchase_repo = purchase_repo or PurchaseRepository()

    async def has_access(
        self,
        session: AsyncSession,
        user_id: Optional[str],
        product_id: str,
    ) -> bool:
        if not user_id:
            return False
        granted = await self.purchase_repo.has_granting_purchase(session, user_id, product_id)
        logger.debug("Acceso user=%s product=%s -> %s", user_id, product_id, granted)
        return granted


_default_service = AccessService()


async def has_access(session: AsyncSession, user_id: Optional[str], product_id: str) -> bool:
    return await _default_service.has_access(session, user_id, product_id)


__all__ = ["AccessService", "has_access"]

# Fin del archivo backend/app/modules/payments/services/access_service.py
