# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/models/__init__.py

Autor: Vitrina
Fecha: 2026-09-05
"""

from .catalog_models import Product, Series, SeriesItem

__all__ = ["Product", "Series", "SeriesItem"]

# Fin del archivo backend/app/modules/catalog/models/__init__.py
