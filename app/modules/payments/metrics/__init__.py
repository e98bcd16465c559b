# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/metrics/__init__.py

Métricas Prometheus del módulo Payments (webhooks, checkout, ingesta).

Autor: Vitrina
Fecha: 2026-09-11
"""

from .exporters.prometheus_exporter import registry, render_prometheus_metrics

__all__ = ["registry", "render_prometheus_metrics"]

# Fin del archivo backend/app/modules/payments/metrics/__init__.py
