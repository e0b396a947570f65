"""GoldSignal – Logging."""
