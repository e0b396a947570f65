"""
GoldSignal – Application DTO: Trading
=======================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from goldsignal.domain.entities.trading_account import AutoTradeSettings, TradingAccount


@dataclass
class ConnectAccountDTO:
    broker_name: str
    account_id: str
    api_key: Optional[str] = None
    api_secret: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectAccountDTO":
        return cls(
            broker_name=data["broker_name"],
            account_id=data["account_id"],
            api_key=data.get("api_key"),
            api_secret=data.get("api_secret"),
        )


@dataclass
class AccountSummaryDTO:
    account: TradingAccount
    settings: Optional[AutoTradeSettings] = None
    total_trades: int = 0
    open_trades: int = 0
    total_profit_loss: float = 0.0
    win_rate: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = self.account.to_dict()
        data.update({
            "auto_trade_settings": self.settings.to_dict() if self.settings else None,
            "total_trades": self.total_trades,
            "open_trades": self.open_trades,
            "total_profit_loss": round(self.total_profit_loss, 2),
            "win_rate": round(self.win_rate, 2),
        })
        return data


@dataclass
class AutoTradeRunDTO:
    """Resumen de ejecutar una señal en todas las cuentas."""

    signal_id: str
    executed: List[str] = field(default_factory=list)      # execution ids
    skipped: Dict[str, str] = field(default_factory=dict)  # account id → motivo
    failed: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signal_id": self.signal_id,
            "executed": list(self.executed),
            "skipped": dict(self.skipped),
            "failed": dict(self.failed),
        }
