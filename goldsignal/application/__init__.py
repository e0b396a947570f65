"""
GoldSignal – Application Layer
================================
Capa de casos de uso y orquestación.

Este módulo contiene:
- use_cases/: Casos de uso (orquestadores de dominio)
- ports/: Interfaces hacia infraestructura
- dto/: Data Transfer Objects

REGLA DE DEPENDENCIA:
Esta capa puede importar de:
- domain/ (entidades, servicios, interfaces)
- ports/ propios (interfaces hacia infra)

NO puede importar de:
- infrastructure/ (implementaciones concretas)
- presentation/ (API)
"""
