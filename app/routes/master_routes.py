# -*- coding: utf-8 -*-
"""
backend/app/routes/master_routes.py

Router maestro: todas las rutas de módulos cuelgan de /api.

  /api/payments/...  (checkout, access, webhooks)
  /api/catalog/...   (ingesta firmada)

Autor: Vitrina
Fecha: 2026-09-16
"""
from __future__ import annotations

import logging

from fastapi import APIRouter

from app.modules.catalog.routes import router as catalog_router
from app.modules.payments.routes import router as payments_router

logger = logging.getLogger(__name__)

api = APIRouter(prefix="/api")

_loaded: list[str] = []


def _include(target: APIRouter, router: APIRouter, name: str) -> None:
    """Incluye un router en la capa dada y registra trazabilidad en logs."""
    target.include_router(router)
    _loaded.append(f"{target.prefix or '/'}:{name}")
    logger.debug("Router '%s' montado en prefix '%s'", name, target.prefix or "/")


_include(api, payments_router, "payments")
_include(api, catalog_router, "catalog")


def loaded_routers() -> list[str]:
    return list(_loaded)


__all__ = ["api", "loaded_routers"]

# Fin del archivo backend/app/routes/master_routes.py
