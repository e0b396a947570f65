"""Capa de infraestructura: persistencia, servicios externos y workers."""
