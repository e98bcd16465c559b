# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/repositories/__init__.py
"""

from .catalog_repository import CatalogRepository

__all__ = ["CatalogRepository"]

# Fin del archivo backend/app/modules/catalog/repositories/__init__.py
