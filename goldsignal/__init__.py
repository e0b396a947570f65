"""
GoldSignal
==========
Backend del dashboard de señales XAUUSD con suscripciones y auto-trading.
"""

__version__ = "1.0.0"
