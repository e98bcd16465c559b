# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/models/__init__.py

Punto de entrada de modelos ORM del módulo Payments.

Autor: Vitrina
Fecha: 2026-09-05
"""

from __future__ import annotations

from .purchase_models import Purchase

__all__ = ["Purchase"]

# Fin del archivo backend/app/modules/payments/models/__init__.py
