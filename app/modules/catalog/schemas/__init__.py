# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/schemas/__init__.py
"""

from .ingest_schemas import IngestPayload, IngestResponse, IngestSeries, IngestSeriesItem

__all__ = ["IngestPayload", "IngestResponse", "IngestSeries", "IngestSeriesItem"]

# Fin del archivo backend/app/modules/catalog/schemas/__init__.py
