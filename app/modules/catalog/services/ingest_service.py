# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/services/ingest_service.py

Aplica un IngestPayload al catálogo en una sola transacción:
producto por slug, serie por product_id y entregas por
(series_id, order_index).

Autor: Vitrina
Fecha: 2026-09-06
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.catalog.repositories import CatalogRepository
from app.modules.catalog.schemas import IngestPayload

logger = logging.getLogger(__name__)


class IngestError(Exception):
    """La escritura de la ingesta falló y se revirtió."""


class IngestService:
    def __init__(self, repository: CatalogRepository | None = None) -> None:
        self.repository = repository or CatalogRepository()

    async def ingest(self, session: AsyncSession, payload: IngestPayload) -> str:
        """
        Publica el payload y devuelve el id del producto.

        Raises:
            IngestError: si la base de datos rechaza cualquier escritura.
        """
        product_values = {
            "slug": payload.slug,
            "title": payload.title,
            "description": payload.description,
            "snippet": payload.snippet,
            "type": payload.type,
            "price_cents": payload.price_cents,
            "is_series": payload.is_series,
            "is_published": payload.publish,
        }
        if payload.file_path is not None:
            product_values["file_path"] = payload.file_path

        try:
            product = await self.repository.upsert_product(session, product_values)

            if payload.is_series and payload.series is not None:
                series = await self.repository.upsert_series(
                    session,
                    product.id,
                    {
                        "interval": payload.series.interval,
                        "price_cents": payload.series.price_cents,
                        "stripe_price_id": payload.series.stripe_price_id,
                        "paypal_plan_id": payload.series.paypal_plan_id,
                    },
                )
                for item in payload.series.items:
                    await self.repository.upsert_series_item(
                        session,
                        series.id,
                        item.order_index,
                        {"title": item.title, "content": item.content, "is_published": True},
                    )

            product_id = product.id
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error("[ingest] Escritura fallida para slug=%s: %s", payload.slug, e)
            raise IngestError(str(e)) from e

        logger.info(
            "[ingest] Producto publicado slug=%s product_id=%s series_items=%d",
            payload.slug,
            product_id,
            len(payload.series.items) if payload.series else 0,
        )
        return product_id


__all__ = ["IngestService", "IngestError"]

# Fin del archivo backend/app/modules/catalog/services/ingest_service.py
