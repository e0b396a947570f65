"""Adaptadores de servicios externos: Twelve Data, PayMongo, broker demo, EventBus."""

from goldsignal.infrastructure.external.demo_broker import DemoBrokerAPI
from goldsignal.infrastructure.external.event_bus import EventBus
from goldsignal.infrastructure.external.paymongo_adapter import PayMongoAdapter
from goldsignal.infrastructure.external.twelve_data_adapter import TwelveDataAdapter

__all__ = ["DemoBrokerAPI", "EventBus", "PayMongoAdapter", "TwelveDataAdapter"]
