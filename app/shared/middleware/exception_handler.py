# -*- coding: utf-8 -*-
"""
backend/app/shared/middleware/exception_handler.py

Última red para excepciones no manejadas.

- Asigna el request id (del proxy o generado) en `request.state`
- Cualquier excepción que escape de las rutas sale como 500 JSON con
  `error_code` y `request_id`; el traceback solo va al log
- Las rutas de webhook devuelven `{"error": ...}` en lugar de `detail`,
  igual que el resto de respuestas de esos endpoints

Autor: Vitrina
Fecha: 2026-09-16
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADERS = ("x-request-id", "x-correlation-id", "cf-ray")
WEBHOOK_PREFIX = "/api/payments/webhooks/"


def get_request_id(request: Request) -> str:
    """Request id de los headers del proxy o uno nuevo de 16 hex."""
    for header in REQUEST_ID_HEADERS:
        value = request.headers.get(header)
        if value:
            return value[:64]
    return uuid.uuid4().hex[:16]


def internal_error_body(path: str, request_id: str) -> Dict[str, Any]:
    if path.startswith(WEBHOOK_PREFIX):
        return {"error": "Internal error", "request_id": request_id}
    return {
        "detail": {
            "error_code": "INTERNAL_SERVER_ERROR",
            "message": "Internal server error",
            "request_id": request_id,
        }
    }


class JSONExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = get_request_id(request)
        request.state.request_id = request_id

        try:
            return await call_next(request)
        except Exception as exc:
            path = request.url.path
            logger.exception(
                "unhandled_exception %s %s: %s",
                request.method,
                path,
                type(exc).__name__,
                extra={"request_id": request_id, "error_type": type(exc).__name__},
            )
            return JSONResponse(
                status_code=500,
                content=internal_error_body(path, request_id),
                headers={"X-Request-ID": request_id},
            )


__all__ = ["JSONExceptionMiddleware", "get_request_id", "internal_error_body"]

# Fin del archivo backend/app/shared/middleware/exception_handler.py
