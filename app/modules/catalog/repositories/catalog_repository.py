# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/repositories/catalog_repository.py

Repositorio del catálogo.

Responsabilidades:
- Lectura fresca de productos (el ledger compara precios contra la BD,
  nunca contra una copia en memoria)
- Upserts usados por la ingesta (por slug, por product_id y por
  (series_id, order_index))

Autor: Vitrina
Fecha: 2026-09-05
"""

from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.catalog.models import Product, Series, SeriesItem


class CatalogRepository(BaseRepository[Product]):
    def __init__(self) -> None:
        super().__init__(Product)

    # -----------------------------------------------------------
    # Lecturas
    # -----------------------------------------------------------
    async def get_product(self, session: AsyncSession, product_id: str) -> Optional[Product]:
        """Obtiene un producto (con su serie) ignorando el identity map."""
        return await self.first(session, select(Product).where(Product.id == product_id), fresh=True)

    async def get_by_slug(self, session: AsyncSession, slug: str) -> Optional[Product]:
        return await self.first(session, select(Product).where(Product.slug == slug))

    async def get_series_for_product(self, session: AsyncSession, product_id: str) -> Optional[Series]:
        return await self.first(session, select(Series).where(Series.product_id == product_id))

    # -----------------------------------------------------------
    # Upserts de ingesta
    # -----------------------------------------------------------
    async def upsert_product(self, session: AsyncSession, values: Mapping[str, Any]) -> Product:
        product = await self.get_by_slug(session, values["slug"])
        return await self.upsert(session, product, Product, {}, values)

    async def upsert_series(
        self,
        session: AsyncSession,
        product_id: str,
        values: Mapping[str, Any],
    ) -> Series:
        series = await self.get_series_for_product(session, product_id)
        return await self.upsert(session, series, Series, {"product_id": product_id}, values)

    async def upsert_series_item(
        self,
        session: AsyncSession,
        series_id: str,
        order_index: int,
        values: Mapping[str, Any],
    ) -> SeriesItem:
        stmt = select(SeriesItem).where(
            SeriesItem.series_id == series_id,
            SeriesItem.order_index == order_index,
        )
        item = await self.first(session, stmt)
        return await self.upsert(
            session,
            item,
            SeriesItem,
            {"series_id": series_id, "order_index": order_index},
            values,
        )

# Fin del archivo backend/app/modules/catalog/repositories/catalog_repository.py
