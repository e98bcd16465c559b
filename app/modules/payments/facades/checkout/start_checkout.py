# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/facades/checkout/start_checkout.py

Fachada de alto nivel para iniciar el checkout de un producto del catálogo.

Orquesta:
- Validación de parámetros (productId, type)
- Lectura del producto (y su serie) desde el catálogo
- Creación de la sesión/orden en el proveedor
- Construcción de CheckoutResponse para el frontend

No escribe en purchases: la compra solo se registra cuando llega el
webhook verificado del proveedor.

Autor: Vitrina
Fecha: 2026-09-14
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.catalog.repositories import CatalogRepository
from app.modules.payments.enums import PaymentProvider
from app.modules.payments.metrics.exporters.prometheus_exporter import increment_checkout
from app.modules.payments.schemas import CheckoutResponse
from app.modules.payments.services.paypal_client import PayPalClient
from app.shared.config.settings_payments import PaymentsSettings
from .provider_sessions import create_provider_checkout_session
from .validators import parse_purchase_type, require_product, require_product_id

logger = logging.getLogger(__name__)


async def start_checkout(
    session: AsyncSession,
    *,
    provider: PaymentProvider,
    product_id: Optional[str],
    purchase_type: Optional[str],
    user_id: str,
    settings: PaymentsSettings,
    paypal_client: PayPalClient,
    customer_email: Optional[str] = None,
    catalog_repo: CatalogRepository | None = None,
) -> CheckoutResponse:
    """
    Inicia el checkout y devuelve la URL del proveedor.

    Raises:
        CheckoutValidationError (y subclases): parámetros o catálogo inválidos.
        ProviderSessionError: el proveedor rechazó o no respondió.
    """
    catalog_repo = catalog_repo or CatalogRepository()

    pid = require_product_id(product_id)
    ptype = parse_purchase_type(purchase_type)
    product = require_product(await catalog_repo.get_product(session, pid), pid)

    info = await create_provider_checkout_session(
        provider=provider,
        settings=settings,
        paypal_client=paypal_client,
        product=product,
        purchase_type=ptype,
        user_id=user_id,
        customer_email=customer_email,
    )
    increment_checkout(provider.value, ptype.value)

    return CheckoutResponse(
        url=info.redirect_url,
        provider=provider,
        purchase_type=ptype,
        provider_session_id=info.provider_session_id,
    )


__all__ = ["start_checkout"]

# Fin del archivo backend/app/modules/payments/facades/checkout/start_checkout.py
