# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/schemas/ingest_schemas.py

Esquemas Pydantic del endpoint de ingesta de contenido.

Autor: Vitrina
Fecha: 2026-09-06
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.modules.catalog.enums import ProductType, SeriesInterval


class IngestSeriesItem(BaseModel):
    title: str = Field(min_length=1)
    content: str = ""
    order_index: int = Field(ge=0)


class IngestSeries(BaseModel):
    interval: SeriesInterval
    price_cents: int = Field(ge=0)
    stripe_price_id: Optional[str] = None
    paypal_plan_id: Optional[str] = None
    items: List[IngestSeriesItem] = Field(default_factory=list)


class IngestPayload(BaseModel):
    """Payload firmado que publica o actualiza un producto (y su serie)."""

    slug: str = Field(min_length=1, max_length=200)
    title: str = Field(min_length=1)
    description: str = ""
    snippet: str = ""
    type: ProductType
    price_cents: int = Field(ge=0)
    is_series: bool = False
    series: Optional[IngestSeries] = None
    file_path: Optional[str] = None
    publish: bool = True

    @model_validator(mode="after")
    def _series_requires_flag(self) -> "IngestPayload":
        if self.series is not None and not self.is_series:
            raise ValueError("series provided but is_series is false")
        return self


class IngestResponse(BaseModel):
    ok: bool = True
    product_id: str


__all__ = ["IngestSeriesItem", "IngestSeries", "IngestPayload", "IngestResponse"]

# Fin del archivo backend/app/modules/catalog/schemas/ingest_schemas.py
