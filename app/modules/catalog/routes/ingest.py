# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/routes/ingest.py

Ingesta firmada de contenido (publicación de productos y series).

Endpoints:
- POST    /catalog/ingest   (header x-hmac-signature)
- OPTIONS /catalog/ingest   (preflight CORS)

Respuestas:
- 200 {"ok": true, "product_id": ...}
- 401 firma ausente, secreto no configurado o firma inválida
- 400 payload inválido o escritura rechazada

Autor: Vitrina
Fecha: 2026-09-15
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.database import get_async_session
from app.modules.catalog.schemas import IngestPayload, IngestResponse
from app.modules.catalog.services import IngestError, IngestService
from app.modules.payments.facades.webhooks import WEBHOOK_CORS_HEADERS, ensure_hmac_signature
from app.modules.payments.metrics.exporters.prometheus_exporter import observe_ingest
from app.modules.payments.routes.dependencies import get_app_payments_settings
from app.modules.payments.services.webhooks.signature_verification import (
    InvalidSignature,
    MissingCredential,
)
from app.shared.config.settings_payments import PaymentsSettings

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/catalog",
    tags=["catalog:ingest"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=WEBHOOK_CORS_HEADERS)


@router.options("/ingest", include_in_schema=False)
async def ingest_preflight() -> Response:
    return Response(status_code=200, headers=WEBHOOK_CORS_HEADERS)


@router.post("/ingest", response_model=IngestResponse)
async def ingest_content(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    settings: PaymentsSettings = Depends(get_app_payments_settings),
):
    raw_body = await request.body()

    try:
        ensure_hmac_signature(raw_body, request.headers, settings.ingest_hmac_secret)
    except MissingCredential:
        observe_ingest("rejected")
        logger.warning("[ingest] Firma ausente o INGEST_HMAC_SECRET no configurado")
        return _error(401, "Missing signature")
    except InvalidSignature:
        observe_ingest("rejected")
        logger.warning("[ingest] Firma inválida")
        return _error(401, "Invalid signature")

    try:
        payload = IngestPayload.model_validate_json(raw_body)
    except ValidationError as e:
        observe_ingest("invalid")
        logger.warning("[ingest] Payload inválido: %s", e.error_count())
        return _error(400, "Invalid payload")

    try:
        product_id = await IngestService().ingest(session, payload)
    except IngestError as e:
        observe_ingest("error")
        return _error(400, str(e))

    observe_ingest("ok")
    return JSONResponse(
        content=IngestResponse(product_id=product_id).model_dump(),
        headers=WEBHOOK_CORS_HEADERS,
    )


# Fin del archivo backend/app/modules/catalog/routes/ingest.py
