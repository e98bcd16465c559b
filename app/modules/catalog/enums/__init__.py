# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/enums/__init__.py

Enums del catálogo.

Autor: Vitrina
Fecha: 2026-09-05
"""

from enum import StrEnum


class ProductType(StrEnum):
    EBOOK = "ebook"
    NEWSLETTER = "newsletter"
    TEMPLATE = "template"

    __db_enum_name__ = "product_type_enum"


class SeriesInterval(StrEnum):
    MONTH = "month"
    YEAR = "year"

    __db_enum_name__ = "series_interval_enum"


__all__ = ["ProductType", "SeriesInterval"]

# Fin del archivo backend/app/modules/catalog/enums/__init__.py
