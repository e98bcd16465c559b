# -*- coding: utf-8 -*-
"""
backend/app/shared/middleware/request_logging.py

Log de acceso por request con canal de negocio.

Cada request se clasifica en un canal según su path (webhook de Stripe,
webhook de PayPal, checkout, acceso, ingesta o "http"). Los canales de
pagos se registran en INFO; el resto en DEBUG; cualquier 5xx en WARNING.
Los datos van en `extra` para que el formateador JSON los emita como campos.

/metrics y /health no se registran: los consultan sondas cada pocos segundos.

Autor: Vitrina
Fecha: 2026-09-16
"""

from __future__ import annotations

import logging
import re
import time
from typing import Callable, Optional, Sequence, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .exception_handler import get_request_id

logger = logging.getLogger(__name__)

SILENT_PATHS = re.compile(r"^/(metrics|health)(/|$)")

# Orden relevante: el primer patrón que coincide gana
CHANNELS: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"^/api/payments/webhooks/stripe"), "webhook.stripe"),
    (re.compile(r"^/api/payments/webhooks/paypal"), "webhook.paypal"),
    (re.compile(r"^/api/payments/checkout"), "checkout"),
    (re.compile(r"^/api/payments/access"), "access"),
    (re.compile(r"^/api/catalog/ingest"), "ingest"),
)

BUSINESS_CHANNELS = frozenset(name for _, name in CHANNELS)


def classify_path(path: str) -> str:
    for pattern, name in CHANNELS:
        if pattern.match(path):
            return name
    return "http"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, silent_paths: Optional[Sequence[re.Pattern]] = None):
        super().__init__(app)
        self.silent_paths = tuple(silent_paths) if silent_paths else (SILENT_PATHS,)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if any(p.match(path) for p in self.silent_paths):
            return await call_next(request)

        request_id = getattr(request.state, "request_id", None) or get_request_id(request)
        request.state.request_id = request_id
        channel = classify_path(path)

        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers.setdefault("X-Request-ID", request_id)
            return response
        finally:
            if status >= 500:
                level = logging.WARNING
            elif channel in BUSINESS_CHANNELS:
                level = logging.INFO
            else:
                level = logging.DEBUG
            logger.log(
                level,
                "%s %s -> %d [%s]",
                request.method,
                path,
                status,
                channel,
                extra={
                    "request_id": request_id,
                    "channel": channel,
                    "status_code": status,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )


__all__ = ["RequestLoggingMiddleware", "classify_path"]

# Fin del archivo backend/app/shared/middleware/request_logging.py
