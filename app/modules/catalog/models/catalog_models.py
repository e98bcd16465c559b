# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/models/catalog_models.py

Modelos ORM del catálogo: products, series y series_items.

Autor: Vitrina
Fecha: 2026-09-05
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.shared.database.base import Base, as_db_enum
from app.modules.catalog.enums import ProductType, SeriesInterval


def _uuid() -> str:
    return str(uuid4())


class Product(Base):
    """Producto publicable (ebook, newsletter o plantilla)."""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    snippet: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[ProductType] = mapped_column(as_db_enum(ProductType), nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_series: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    file_path: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    series: Mapped[Optional["Series"]] = relationship(
        "Series",
        back_populates="product",
        uselist=False,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} slug={self.slug} type={self.type}>"


class Series(Base):
    """Configuración de suscripción de un producto serializado."""

    __tablename__ = "series"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    product_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    interval: Mapped[SeriesInterval] = mapped_column(as_db_enum(SeriesInterval), nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    stripe_price_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    paypal_plan_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    product: Mapped["Product"] = relationship("Product", back_populates="series")
    items: Mapped[List["SeriesItem"]] = relationship(
        "SeriesItem",
        back_populates="series",
        order_by="SeriesItem.order_index",
        lazy="noload",
    )


class SeriesItem(Base):
    """Entrega individual de una serie."""

    __tablename__ = "series_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    series_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("series.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    series: Mapped["Series"] = relationship("Series", back_populates="items")

    __table_args__ = (
        UniqueConstraint("series_id", "order_index", name="uq_series_items_series_order"),
    )

# Fin del archivo backend/app/modules/catalog/models/catalog_models.py
