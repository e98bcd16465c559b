# -*- coding: utf-8 -*-
"""
backend/app/observability/prom.py

Observabilidad Prometheus de Vitrina.

Incluye:
- Middleware HTTP para conteo y latencia por ruta/estado
- Endpoint /metrics que concatena el registro HTTP y el de pagos

El label `path` usa la plantilla de la ruta (/payments/access/{product_id})
para no crear una serie por cada id.

Autor: Vitrina
Fecha: 2026-09-16
"""
from __future__ import annotations

from time import perf_counter

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from app.modules.payments.metrics.exporters.prometheus_exporter import render_prometheus_metrics

http_registry = CollectorRegistry()

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
    registry=http_registry,
)
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "Latency per request (s)",
    ["method", "path", "status"],
    registry=http_registry,
)

UNMATCHED_PATH = "__unmatched__"


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_PATH


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        start = perf_counter()
        resp = await call_next(request)
        elapsed = perf_counter() - start

        labels = (request.method, route_template(request), str(resp.status_code))
        REQUEST_LATENCY.labels(*labels).observe(elapsed)
        REQUEST_COUNT.labels(*labels).inc()
        return resp


def render_metrics() -> bytes:
    return generate_latest(http_registry) + render_prometheus_metrics()


def mount_metrics(app: FastAPI, path: str = "/metrics") -> None:
    @app.get(path, include_in_schema=False)
    def metrics():
        return Response(content=render_metrics(), media_type=CONTENT_TYPE_LATEST)


def setup_observability(app: FastAPI, enabled: bool = True) -> None:
    """Agrega middleware de Prometheus y monta el endpoint /metrics."""
    if not enabled:
        return
    app.add_middleware(PrometheusMiddleware)
    mount_metrics(app)


__all__ = ["setup_observability", "render_metrics", "http_registry"]

# Fin del archivo backend/app/observability/prom.py
