# -*- coding: utf-8 -*-
"""
backend/app/__init__.py

Paquete principal 'app' del backend de Vitrina.

Autor: Vitrina
Fecha: 2026-09-02
"""

# Fin del archivo backend/app/__init__.py
