"""Test Twelve Data adapter: parsing, price cache and daily quota."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from goldsignal.application.ports.errors import MarketDataError
from goldsignal.infrastructure.external.twelve_data_adapter import TwelveDataAdapter


class Clock:
    def __init__(self):
        self.now = datetime(2026, 2, 10, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now


def _adapter(settings, handler, clock=None, **overrides):
    if overrides:
        settings = settings.model_copy(update=overrides)
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url=settings.twelve_data_base_url,
    )
    return TwelveDataAdapter(settings, client=client, clock=clock or Clock())


def _recorder(payload, status_code=200):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, json=payload)

    return handler, requests


async def test_gold_price_is_cached(settings):
    handler, requests = _recorder({"price": "2651.45"})
    adapter = _adapter(settings, handler)

    assert await adapter.get_gold_price() == 2651.45
    assert await adapter.get_gold_price() == 2651.45
    assert len(requests) == 1
    assert requests[0].url.path == "/price"
    assert requests[0].url.params["symbol"] == "XAU/USD"
    assert requests[0].url.params["apikey"] == "td-test-key"
    assert adapter.last_price == 2651.45
    assert adapter.usage_stats()["requests_today"] == 1


async def test_cache_disabled_hits_provider_each_time(settings):
    handler, requests = _recorder({"price": "2651.45"})
    adapter = _adapter(settings, handler, price_cache_seconds=0)
    await adapter.get_gold_price()
    await adapter.get_gold_price()
    assert len(requests) == 2
    assert adapter.remaining_requests() == 798


async def test_quote_parsing(settings):
    handler, requests = _recorder({
        "symbol": "XAU/USD", "close": "2651.20", "change": "3.10",
        "percent_change": "0.117", "high": "2655.00", "low": "2640.50",
        "datetime": "2026-02-10",
    })
    adapter = _adapter(settings, handler)
    quote = await adapter.get_quote()

    assert requests[0].url.path == "/quote"
    assert quote.symbol == "XAUUSD"
    assert quote.price == 2651.2
    assert quote.change == 3.1
    assert quote.low == 2640.5
    assert quote.volume == 0.0
    assert quote.timestamp == datetime(2026, 2, 10, tzinfo=timezone.utc)
    assert adapter.last_price == 2651.2


async def test_historical_bars(settings):
    handler, requests = _recorder({"values": [
        {"datetime": "2026-02-10 11:00:00", "open": "2648", "high": "2652",
         "low": "2647", "close": "2651"},
        {"datetime": "2026-02-10 10:00:00", "open": "2645", "high": "2649",
         "low": "2644", "close": "2648"},
    ]})
    adapter = _adapter(settings, handler)
    bars = await adapter.get_historical_data(interval="1h", outputsize=2)

    assert requests[0].url.path == "/time_series"
    assert requests[0].url.params["interval"] == "1h"
    assert requests[0].url.params["outputsize"] == "2"
    assert [b.close for b in bars] == [2651.0, 2648.0]
    assert bars[0].timestamp == datetime(2026, 2, 10, 11, tzinfo=timezone.utc)


async def test_http_429_exhausts_quota_until_next_day(settings):
    clock = Clock()
    handler, requests = _recorder({"message": "Too many requests"}, status_code=429)
    adapter = _adapter(settings, handler, clock=clock)

    with pytest.raises(MarketDataError) as exc_info:
        await adapter.get_gold_price()
    assert exc_info.value.quota_exhausted
    assert adapter.quota_exhausted
    assert adapter.remaining_requests() == 0

    with pytest.raises(MarketDataError, match="daily API limit reached"):
        await adapter.get_gold_price()
    assert len(requests) == 1

    clock.now += timedelta(days=1)
    assert not adapter.quota_exhausted
    assert adapter.remaining_requests() == 800


@pytest.mark.parametrize("payload", [
    {"status": "error", "code": 429, "message": "Too many requests"},
    {"status": "error", "code": 403,
     "message": "You have run out of API credits for the day."},
])
async def test_error_body_exhausts_quota(settings, payload):
    handler, _ = _recorder(payload)
    adapter = _adapter(settings, handler)
    with pytest.raises(MarketDataError) as exc_info:
        await adapter.get_gold_price()
    assert exc_info.value.quota_exhausted
    assert adapter.usage_stats()["quota_exhausted"] is True


async def test_generic_api_error(settings):
    handler, _ = _recorder({"status": "error", "code": 400, "message": "symbol not found"})
    adapter = _adapter(settings, handler)
    with pytest.raises(MarketDataError, match="symbol not found") as exc_info:
        await adapter.get_gold_price()
    assert not exc_info.value.quota_exhausted
    assert not adapter.quota_exhausted


async def test_daily_limit_counter(settings):
    handler, requests = _recorder({"price": "2650"})
    adapter = _adapter(settings, handler, twelve_data_daily_limit=2, price_cache_seconds=0)
    await adapter.get_gold_price()
    await adapter.get_gold_price()
    with pytest.raises(MarketDataError, match="daily API limit reached"):
        await adapter.get_gold_price()
    assert len(requests) == 2

    adapter.reset_quota()
    assert adapter.remaining_requests() == 2


async def test_missing_api_key(settings):
    handler, requests = _recorder({"price": "2650"})
    adapter = _adapter(settings, handler, twelve_data_api_key="")
    with pytest.raises(MarketDataError, match="API key not configured"):
        await adapter.get_gold_price()
    assert requests == []


async def test_transport_error(settings):
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    adapter = _adapter(settings, handler)
    with pytest.raises(MarketDataError):
        await adapter.get_gold_price()
    assert adapter.last_price is None


async def test_invalid_price_payload(settings):
    handler, _ = _recorder({"price": "n/a"})
    adapter = _adapter(settings, handler)
    with pytest.raises(MarketDataError):
        await adapter.get_gold_price()
