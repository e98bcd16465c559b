# -*- coding: utf-8 -*-
"""
backend/app/shared/__init__.py

Infraestructura compartida de Vitrina: configuración, base de datos,
middlewares HTTP y contexto de autenticación.

No inicializa nada en import-time; cada consumidor importa el subpaquete
que necesita:

    from app.shared.config import get_settings
    from app.shared.database import session_scope

Autor: Vitrina
Fecha: 2026-09-03
"""

__all__: list[str] = []

# Fin del archivo backend/app/shared/__init__.py
