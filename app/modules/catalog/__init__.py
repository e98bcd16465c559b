# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/__init__.py

Módulo Catalog: productos, series y entregas de series.
El núcleo de pagos solo lee de aquí; la única escritura es la ingesta
firmada con HMAC.

Autor: Vitrina
Fecha: 2026-09-05
"""
