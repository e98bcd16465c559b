# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/purchase_models.py

Modelo ORM para la tabla purchases (ledger de derechos de acceso).

Una fila por (provider, provider_reference): esa pareja es la clave de
idempotencia de los webhooks. Las filas nunca se borran; solo cambia
su `status` según las reglas de transición del ledger.

Autor: Vitrina
Fecha: 2026-09-05
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, as_db_enum
from app.modules.payments.enums import PaymentProvider, PurchaseStatus, PurchaseType


class Purchase(Base):
    """Compra o suscripción registrada a partir de un webhook verificado."""

    __tablename__ = "purchases"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    provider: Mapped[PaymentProvider] = mapped_column(
        as_db_enum(PaymentProvider),
        nullable=False,
    )

    provider_reference: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Session/subscription id (Stripe) o capture/sale/subscription id (PayPal).",
    )

    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    product_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    purchase_type: Mapped[PurchaseType] = mapped_column(
        as_db_enum(PurchaseType),
        nullable=False,
    )

    amount_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Monto cobrado en unidades menores.",
    )

    status: Mapped[PurchaseStatus] = mapped_column(
        as_db_enum(PurchaseStatus),
        nullable=False,
    )

    # Identificador secundario para casar reembolsos (Stripe payment_intent)
    payment_reference: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        index=True,
    )

    # Session id de Stripe cuando la referencia primaria es la suscripción
    checkout_reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    last_event_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Timestamp del proveedor del último evento aplicado.",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "provider",
            "provider_reference",
            name="uq_purchases_provider_reference",
        ),
        Index("ix_purchases_user_product_status", "user_id", "product_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Purchase id={self.id} provider={self.provider} "
            f"ref={self.provider_reference} status={self.status}>"
        )

# Fin del archivo backend/app/modules/payments/models/purchase_models.py
