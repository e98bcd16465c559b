# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/services/__init__.py
"""

from .ingest_service import IngestService, IngestError

__all__ = ["IngestService", "IngestError"]

# Fin del archivo backend/app/modules/catalog/services/__init__.py
