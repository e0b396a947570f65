"""Test in-process event fan-out and WebSocket broadcasting."""

import asyncio
import json

from goldsignal.domain.events.domain_events import PriceUpdated, SignalClosed, SignalPublished
from goldsignal.infrastructure.external.event_bus import EventBus
from goldsignal.presentation.websocket.websocket_manager import WebSocketManager


async def test_fan_out_per_consumer():
    bus = EventBus()
    first = await bus.subscribe("price", "a")
    second = await bus.subscribe("price", "b")
    other = await bus.subscribe("signal_closed", "c")

    event = PriceUpdated(symbol="XAUUSD", price=2651.4)
    await bus.publish(event)

    assert first.get_nowait() is event
    assert second.get_nowait() is event
    assert other.empty()
    assert bus.stats["published"] == 1
    assert bus.subscriber_count("price") == 2


async def test_drop_oldest_when_queue_is_full():
    bus = EventBus(max_queue_size=2)
    queue = await bus.subscribe("price", "slow")
    for price in (1.0, 2.0, 3.0):
        await bus.publish(PriceUpdated(symbol="XAUUSD", price=price))

    assert [queue.get_nowait().price for _ in range(queue.qsize())] == [2.0, 3.0]
    assert bus.stats["dropped"] == 1


async def test_unsubscribe():
    bus = EventBus()
    queue = await bus.subscribe("signal_published", "x")
    await bus.subscribe("signal_closed", "y")

    await bus.unsubscribe("signal_published", queue)
    await bus.publish(SignalPublished(signal_id="s1"))
    assert queue.empty()
    assert bus.subscriber_count("signal_published") == 0

    await bus.unsubscribe_all()
    assert bus.stats["topics"] == {}


class FakeWebSocket:
    def __init__(self, fail: bool = False):
        self.accepted = False
        self.sent = []
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_text(self, payload):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(json.loads(payload))

    async def close(self):
        pass


async def test_broadcast_drops_broken_clients():
    manager = WebSocketManager(EventBus())
    good, broken = FakeWebSocket(), FakeWebSocket(fail=True)
    await manager.connect(good)
    await manager.connect(broken)
    assert good.accepted and manager.client_count == 2

    delivered = await manager.broadcast("price", {"price": 2650.0})
    assert delivered == 1
    assert good.sent == [{"type": "price", "data": {"price": 2650.0}}]
    assert manager.client_count == 1


async def test_bus_events_reach_clients():
    bus = EventBus()
    manager = WebSocketManager(bus)
    client = FakeWebSocket()
    await manager.connect(client)
    await manager.start()
    try:
        await bus.publish(SignalClosed(signal_id="s1", symbol="XAUUSD", result="win"))
        for _ in range(50):
            if client.sent:
                break
            await asyncio.sleep(0.01)
    finally:
        await manager.stop()

    assert client.sent[0]["type"] == "signal_closed"
    assert client.sent[0]["data"]["result"] == "win"
