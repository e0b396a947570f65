"""Workers en segundo plano: monitor de señales y listener de auto-trading."""

from goldsignal.infrastructure.workers.auto_trade_listener import AutoTradeListener
from goldsignal.infrastructure.workers.signal_monitor import SignalMonitorWorker

__all__ = ["AutoTradeListener", "SignalMonitorWorker"]
