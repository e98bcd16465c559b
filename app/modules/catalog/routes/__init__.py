# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/routes/__init__.py

Ensamblador de rutas del módulo Catalog.

Autor: Vitrina
Fecha: 2026-09-15
"""

from fastapi import APIRouter

from .ingest import router as ingest_router

router = APIRouter()
router.include_router(ingest_router)

__all__ = ["router"]

# Fin del archivo backend/app/modules/catalog/routes/__init__.py
