"""GoldSignal – Configuración."""
