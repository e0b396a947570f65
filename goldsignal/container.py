"""
Dependency Injection Container.

Este módulo proporciona el contenedor de inyección de dependencias
que gestiona todas las instancias de servicios, adaptadores y casos de uso.

Clean Architecture: Este contenedor vive en la capa más externa y es el único
lugar donde se crean dependencias concretas.

CICLO DE VIDA:
  - Servicios y adaptadores: singleton perezoso por contenedor
  - Casos de uso: una instancia por unidad de trabajo (request / iteración)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from goldsignal.application.ports.broker_api import IBrokerAPI
from goldsignal.application.ports.event_publisher import IEventPublisher
from goldsignal.application.ports.market_data_provider import IMarketDataProvider
from goldsignal.application.ports.payment_gateway import IPaymentGateway
from goldsignal.application.use_cases import (
    AutoTradeUseCase,
    ManageSignalsUseCase,
    MonitorSignalsUseCase,
    NotificationUseCase,
    StatsUseCase,
    SubscriptionUseCase,
    UserUseCase,
)
from goldsignal.domain.repositories.unit_of_work import IUnitOfWork
from goldsignal.domain.services.feature_access import FeatureAccessPolicy
from goldsignal.domain.services.risk_calculator import RiskCalculator, RiskConfig
from goldsignal.domain.services.signal_status_calculator import SignalStatusCalculator
from goldsignal.infrastructure.external.demo_broker import DemoBrokerAPI
from goldsignal.infrastructure.external.event_bus import EventBus
from goldsignal.infrastructure.external.paymongo_adapter import PayMongoAdapter
from goldsignal.infrastructure.external.twelve_data_adapter import TwelveDataAdapter
from goldsignal.infrastructure.persistence.database import DatabaseManager
from goldsignal.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork
from goldsignal.infrastructure.workers.auto_trade_listener import AutoTradeListener
from goldsignal.infrastructure.workers.signal_monitor import SignalMonitorWorker
from goldsignal.presentation.websocket.websocket_manager import WebSocketManager
from goldsignal.shared.config.settings import Settings


@dataclass
class Container:
    """
    Contenedor de Inyección de Dependencias.

    Las propiedades crean la instancia la primera vez que se piden;
    override() permite sustituirlas en tests antes de usarlas.
    """

    settings: Settings = field(default_factory=Settings)

    _database: Optional[DatabaseManager] = None
    _event_bus: Optional[EventBus] = None
    _market_data: Optional[IMarketDataProvider] = None
    _payment_gateway: Optional[IPaymentGateway] = None
    _brokers: Optional[Dict[str, IBrokerAPI]] = None

    _risk_calculator: Optional[RiskCalculator] = None
    _status_calculator: Optional[SignalStatusCalculator] = None
    _access_policy: Optional[FeatureAccessPolicy] = None

    _ws_manager: Optional[WebSocketManager] = None
    _signal_monitor: Optional[SignalMonitorWorker] = None
    _auto_trade_listener: Optional[AutoTradeListener] = None

    # ==================== Infraestructura ====================

    @property
    def database(self) -> DatabaseManager:
        if self._database is None:
            self._database = DatabaseManager(self.settings)
        return self._database

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            self._event_bus = EventBus(max_queue_size=self.settings.event_bus_max_queue_size)
        return self._event_bus

    @property
    def event_publisher(self) -> IEventPublisher:
        return self.event_bus

    @property
    def market_data(self) -> IMarketDataProvider:
        if self._market_data is None:
            self._market_data = TwelveDataAdapter(self.settings)
        return self._market_data

    @property
    def payment_gateway(self) -> IPaymentGateway:
        if self._payment_gateway is None:
            self._payment_gateway = PayMongoAdapter(self.settings)
        return self._payment_gateway

    @property
    def brokers(self) -> Dict[str, IBrokerAPI]:
        """Brokers disponibles por nombre; solo el demo está integrado."""
        if self._brokers is None:
            demo = DemoBrokerAPI(
                price_source=lambda: self.market_data.last_price,
                base_price=self.settings.demo_base_price,
            )
            self._brokers = {demo.name: demo}
        return self._brokers

    def uow(self) -> IUnitOfWork:
        """Nueva unidad de trabajo sobre una sesión nueva."""
        return SqlAlchemyUnitOfWork(self.database.get_session)

    # ==================== Domain Services ====================

    @property
    def risk_calculator(self) -> RiskCalculator:
        if self._risk_calculator is None:
            self._risk_calculator = RiskCalculator(RiskConfig(
                max_risk_per_trade=self.settings.max_risk_per_trade,
                min_account_balance=self.settings.min_account_balance,
                timezone=self.settings.trading_timezone,
            ))
        return self._risk_calculator

    @property
    def status_calculator(self) -> SignalStatusCalculator:
        if self._status_calculator is None:
            self._status_calculator = SignalStatusCalculator(pip_size=self.settings.pip_size)
        return self._status_calculator

    @property
    def access_policy(self) -> FeatureAccessPolicy:
        if self._access_policy is None:
            self._access_policy = FeatureAccessPolicy(
                free_signal_limit=self.settings.free_signal_limit,
            )
        return self._access_policy

    # ==================== Use Cases ====================

    def notifications(self, uow: IUnitOfWork) -> NotificationUseCase:
        return NotificationUseCase(uow)

    def manage_signals(self, uow: IUnitOfWork) -> ManageSignalsUseCase:
        return ManageSignalsUseCase(
            uow=uow,
            event_publisher=self.event_publisher,
            status_calculator=self.status_calculator,
            notifications=self.notifications(uow),
            access_policy=self.access_policy,
            market_data=self.market_data,
        )

    def monitor_signals(self, uow: IUnitOfWork) -> MonitorSignalsUseCase:
        return MonitorSignalsUseCase(
            uow=uow,
            market_data=self.market_data,
            event_publisher=self.event_publisher,
            status_calculator=self.status_calculator,
            manage_signals=self.manage_signals(uow),
            symbol=self.settings.instrument_symbol,
        )

    def subscriptions(self, uow: IUnitOfWork) -> SubscriptionUseCase:
        return SubscriptionUseCase(
            uow=uow,
            payment_gateway=self.payment_gateway,
            event_publisher=self.event_publisher,
            notifications=self.notifications(uow),
            app_url=self.settings.app_url,
            payment_methods=self.settings.payment_methods,
            period_days=self.settings.subscription_period_days,
        )

    def auto_trade(self, uow: IUnitOfWork) -> AutoTradeUseCase:
        return AutoTradeUseCase(
            uow=uow,
            brokers=self.brokers,
            risk_calculator=self.risk_calculator,
            event_publisher=self.event_publisher,
        )

    def users(self, uow: IUnitOfWork) -> UserUseCase:
        return UserUseCase(uow, admin_emails=self.settings.admin_emails)

    def stats(self, uow: IUnitOfWork) -> StatsUseCase:
        return StatsUseCase(uow)

    # ==================== Presentation / Workers ====================

    @property
    def ws_manager(self) -> WebSocketManager:
        if self._ws_manager is None:
            self._ws_manager = WebSocketManager(self.event_bus)
        return self._ws_manager

    @property
    def signal_monitor(self) -> SignalMonitorWorker:
        if self._signal_monitor is None:
            self._signal_monitor = SignalMonitorWorker(
                uow_factory=self.uow,
                monitor_factory=self.monitor_signals,
                subscription_factory=self.subscriptions,
                interval=self.settings.signal_monitor_interval,
                subscription_interval=self.settings.subscription_check_interval,
            )
        return self._signal_monitor

    @property
    def auto_trade_listener(self) -> AutoTradeListener:
        if self._auto_trade_listener is None:
            self._auto_trade_listener = AutoTradeListener(
                event_bus=self.event_bus,
                uow_factory=self.uow,
                auto_trade_factory=self.auto_trade,
            )
        return self._auto_trade_listener

    # ==================== Lifecycle ====================

    async def aclose(self) -> None:
        """Cierra clientes HTTP y la base de datos."""
        if self._market_data is not None:
            await self._market_data.close()
        if self._payment_gateway is not None:
            await self._payment_gateway.close()
        if self._database is not None:
            await self._database.close()

    def override(self, name: str, instance: Any) -> None:
        """
        Override una dependencia (útil para tests con fakes).

        Args:
            name: Nombre de la dependencia (ej: 'market_data')
            instance: Instancia a usar
        """
        attr_name = f"_{name}"
        if not hasattr(self, attr_name):
            raise ValueError(f"Unknown dependency: {name}")
        setattr(self, attr_name, instance)


# ==================== Factory ====================

def init_container(settings: Optional[Settings] = None) -> Container:
    """
    Crea el contenedor con configuración específica.

    Args:
        settings: Configuración opcional. Si es None, usa variables de entorno.
    """
    return Container(settings=settings or Settings())
