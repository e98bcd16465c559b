# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/repositories/__init__.py

Autor: Vitrina
Fecha: 2026-09-12
"""

from .purchase_repository import PurchaseRepository

__all__ = ["PurchaseRepository"]

# Fin del archivo backend/app/modules/payments/repositories/__init__.py
