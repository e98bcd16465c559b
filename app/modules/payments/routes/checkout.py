# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/checkout.py

Rutas de inicio de checkout de productos del catálogo.

Endpoint:
- POST /payments/checkout/{provider}?productId=...&type=oneoff|subscription

AUTH: bearer JWT obligatorio (401 sin usuario).

Errores:
- 400 productId ausente / tipo inválido / serie sin precio del proveedor
- 404 producto inexistente
- 502 el proveedor no pudo crear la sesión

Autor: Vitrina
Fecha: 2026-09-15
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import AuthUser, get_current_user
from app.shared.database.database import get_async_session
from app.modules.payments.facades.checkout import (
    CheckoutValidationError,
    ProviderSessionError,
    start_checkout as start_checkout_facade,
)
from app.modules.payments.facades.checkout.validators import parse_provider
from app.modules.payments.schemas import CheckoutResponse
from app.modules.payments.services.paypal_client import PayPalClient
from app.shared.config.settings_payments import PaymentsSettings
from .dependencies import get_app_payments_settings, get_paypal_client

router = APIRouter(
    prefix="/checkout",
    tags=["payments:checkout"],
)


@router.post("/{provider}", response_model=CheckoutResponse)
async def start_checkout(
    provider: str,
    product_id: Optional[str] = Query(default=None, alias="productId"),
    purchase_type: Optional[str] = Query(default=None, alias="type"),
    session: AsyncSession = Depends(get_async_session),
    user: AuthUser = Depends(get_current_user),
    settings: PaymentsSettings = Depends(get_app_payments_settings),
    paypal_client: PayPalClient = Depends(get_paypal_client),
) -> CheckoutResponse:
    try:
        return await start_checkout_facade(
            session,
            provider=parse_provider(provider),
            product_id=product_id,
            purchase_type=purchase_type,
            user_id=user.user_id,
            customer_email=user.email,
            settings=settings,
            paypal_client=paypal_client,
        )
    except CheckoutValidationError as e:
        raise HTTPException(status_code=e.status_code, detail={"error": str(e)}) from e
    except ProviderSessionError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail={"error": str(e)}) from e


# Fin del archivo backend/app/modules/payments/routes/checkout.py
