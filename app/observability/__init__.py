# -*- coding: utf-8 -*-
"""
backend/app/observability/__init__.py
"""

from .prom import setup_observability, render_metrics

__all__ = ["setup_observability", "render_metrics"]

# Fin del archivo backend/app/observability/__init__.py
