# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/metrics/exporters/prometheus_exporter.py

Exporter Prometheus para el módulo de pagos.
Registro propio (no el global) para que /metrics lo concatene y los
tests puedan leer valores sin interferencias.

Autor: Vitrina
Fecha: 2026-09-11
"""

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)
import logging

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------
# Registro de Prometheus del módulo
# --------------------------------------------------------------------------
registry = CollectorRegistry()

# --------------------------------------------------------------------------
# Definición de métricas
# --------------------------------------------------------------------------

WEBHOOKS_RECEIVED_TOTAL = Counter(
    "payments_webhook_received_total",
    "Total webhooks recibidos por proveedor",
    ["provider"],
    registry=registry,
)
WEBHOOKS_REJECTED_TOTAL = Counter(
    "payments_webhook_rejected_total",
    "Total webhooks rechazados por proveedor y razón",
    ["provider", "reason"],
    registry=registry,
)
WEBHOOKS_OUTCOME_TOTAL = Counter(
    "payments_webhook_outcome_total",
    "Total webhooks por outcome (recorded/already_recorded/updated/.../ignored_<razón>)",
    ["provider", "outcome"],
    registry=registry,
)
WEBHOOKS_PROCESSING_SECONDS = Histogram(
    "payments_webhook_processing_seconds",
    "Tiempo de procesamiento de webhooks (segundos)",
    ["provider"],
    registry=registry,
)
AMOUNT_MISMATCH_TOTAL = Counter(
    "payments_amount_mismatch_total",
    "Compras cuyo monto difiere del precio de catálogo",
    ["provider"],
    registry=registry,
)
CHECKOUT_STARTED_TOTAL = Counter(
    "payments_checkout_started_total",
    "Número total de checkouts iniciados",
    ["provider", "purchase_type"],
    registry=registry,
)
INGEST_TOTAL = Counter(
    "catalog_ingest_total",
    "Ingestas de contenido por resultado",
    ["result"],
    registry=registry,
)

# --------------------------------------------------------------------------
# Funciones auxiliares
# --------------------------------------------------------------------------
def render_prometheus_metrics() -> bytes:
    """Salida actual de las métricas del módulo en formato Prometheus."""
    return generate_latest(registry)


def observe_webhook_received(provider: str) -> None:
    WEBHOOKS_RECEIVED_TOTAL.labels(provider=provider).inc()


def observe_webhook_rejected(provider: str, reason: str) -> None:
    """
    Registra webhook rechazado.

    Args:
        provider: stripe/paypal
        reason: invalid_signature/missing_credential/verification_unavailable/
                invalid_payload/storage_failure/catalog_lookup_failed
    """
    WEBHOOKS_REJECTED_TOTAL.labels(provider=provider, reason=reason).inc()
    logger.debug("[Prometheus] Webhook %s rejected reason=%s", provider, reason)


def observe_webhook_outcome(provider: str, outcome: str) -> None:
    WEBHOOKS_OUTCOME_TOTAL.labels(provider=provider, outcome=outcome).inc()


def observe_webhook_duration(provider: str, duration: float) -> None:
    WEBHOOKS_PROCESSING_SECONDS.labels(provider=provider).observe(duration)


def observe_amount_mismatch(provider: str) -> None:
    AMOUNT_MISMATCH_TOTAL.labels(provider=provider).inc()


def increment_checkout(provider: str, purchase_type: str) -> None:
    CHECKOUT_STARTED_TOTAL.labels(provider=provider, purchase_type=purchase_type).inc()


def observe_ingest(result: str) -> None:
    INGEST_TOTAL.labels(result=result).inc()


def sample_value(name: str, labels: dict) -> float:
    """Valor actual de una muestra (0.0 si aún no existe)."""
    value = registry.get_sample_value(name, labels)
    return value if value is not None else 0.0


__all__ = [
    "registry",
    "render_prometheus_metrics",
    "observe_webhook_received",
    "observe_webhook_rejected",
    "observe_webhook_outcome",
    "observe_webhook_duration",
    "observe_amount_mismatch",
    "increment_checkout",
    "observe_ingest",
    "sample_value",
]

# Fin del archivo backend/app/modules/payments/metrics/exporters/prometheus_exporter.py
