# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/webhooks_stripe.py

Webhook endpoint para Stripe.

Endpoints:
- POST    /payments/webhooks/stripe
- OPTIONS /payments/webhooks/stripe  (preflight CORS)

La firma se verifica sobre el body crudo antes de parsear JSON.

Autor: Vitrina
Fecha: 2026-09-15
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.database import get_async_session
from app.modules.payments.facades.webhooks import WEBHOOK_CORS_HEADERS, WebhookDispatcher
from .dependencies import get_stripe_dispatcher

router = APIRouter(
    prefix="/webhooks",
    tags=["payments:webhooks"],
)


@router.options("/stripe", include_in_schema=False)
async def stripe_webhook_preflight() -> Response:
    return Response(status_code=200, headers=WEBHOOK_CORS_HEADERS)


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    dispatcher: WebhookDispatcher = Depends(get_stripe_dispatcher),
) -> JSONResponse:
    """Recibe eventos de Stripe (checkout, invoice, subscription, charge)."""
    raw_body = await request.body()
    result = await dispatcher.dispatch(session, raw_body, request.headers)
    return JSONResponse(status_code=result.status_code, content=result.body, headers=WEBHOOK_CORS_HEADERS)


# Fin del archivo backend/app/modules/payments/routes/webhooks_stripe.py
