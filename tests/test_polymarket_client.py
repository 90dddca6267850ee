import asyncio
import logging

import httpx
import pytest

from treasury_risk.polymarket.client import PolymarketClient, PolymarketError


def _mock_async_client(routes, calls):
    """routes maps path -> payload, httpx.Response factory, or exception."""

    class MockAsyncClient:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def get(self, url, params=None, headers=None):
            calls.append((url, params or {}))
            request = httpx.Request("GET", url, params=params)
            path = url.rsplit("/", 1)[-1]
            route = routes.get(path, [])
            if isinstance(route, Exception):
                raise route
            if isinstance(route, int):
                return httpx.Response(route, json={"error": "nope"}, request=request)
            return httpx.Response(200, json=route, request=request)

    return MockAsyncClient


def _market(slug: str, prices: str = '["0.31","0.69"]') -> dict:
    return {
        "id": "517310",
        "slug": slug,
        "question": "US recession by end of 2026?",
        "conditionId": "0xdeadbeef",
        "outcomes": '["Yes","No"]',
        "outcomePrices": prices,
        "active": True,
        "closed": False,
    }


def test_fetch_market_by_slug_returns_first_match(monkeypatch):
    calls = []
    routes = {"markets": [_market("us-recession-by-end-of-2026"), _market("other")]}
    monkeypatch.setattr(httpx, "AsyncClient", _mock_async_client(routes, calls))

    client = PolymarketClient(base_url="https://gamma.test/")
    market = asyncio.run(client.fetch_market_by_slug("us-recession-by-end-of-2026"))

    assert calls == [("https://gamma.test/markets", {"slug": "us-recession-by-end-of-2026"})]
    assert market.slug == "us-recession-by-end-of-2026"
    assert market.yes_price == pytest.approx(0.31)


def test_fetch_market_empty_array_is_none(monkeypatch):
    calls = []
    monkeypatch.setattr(httpx, "AsyncClient", _mock_async_client({"markets": []}, calls))

    client = PolymarketClient(base_url="https://gamma.test")
    assert asyncio.run(client.fetch_market_by_slug("missing")) is None


def test_fetch_event_by_slug_parses_nested_markets(monkeypatch):
    calls = []
    routes = {
        "events": [
            {
                "id": 1,
                "slug": "how-many-fed-rate-cuts-in-2025",
                "title": "How many Fed rate cuts in 2025?",
                "markets": [
                    {"question": "0 cuts", "outcomePrices": '["0.1","0.9"]'},
                    {"question": "1 cut", "outcomePrices": '["0.9","0.1"]'},
                ],
            }
        ]
    }
    monkeypatch.setattr(httpx, "AsyncClient", _mock_async_client(routes, calls))

    client = PolymarketClient(base_url="https://gamma.test")
    event = asyncio.run(client.fetch_event_by_slug("how-many-fed-rate-cuts-in-2025"))

    assert calls[0][0] == "https://gamma.test/events"
    assert event.title == "How many Fed rate cuts in 2025?"
    assert [m.yes_price for m in event.markets] == [0.1, 0.9]


def test_non_2xx_raises_polymarket_error_and_logs(monkeypatch, caplog):
    calls = []
    monkeypatch.setattr(httpx, "AsyncClient", _mock_async_client({"markets": 503}, calls))

    client = PolymarketClient(base_url="https://gamma.test")
    with caplog.at_level(logging.WARNING):
        with pytest.raises(PolymarketError, match="status=503"):
            asyncio.run(client.fetch_market_by_slug("us-recession-in-2025"))

    assert len(calls) == 1
    assert "upstream_request_error upstream=polymarket" in caplog.text


def test_non_list_payload_raises(monkeypatch):
    calls = []
    monkeypatch.setattr(httpx, "AsyncClient", _mock_async_client({"markets": {"error": "x"}}, calls))

    client = PolymarketClient(base_url="https://gamma.test")
    with pytest.raises(PolymarketError, match="non-list"):
        asyncio.run(client.fetch_market_by_slug("us-recession-in-2025"))


def test_transport_error_is_not_retried_by_default(monkeypatch):
    calls = []
    routes = {"markets": httpx.ConnectError("connection refused")}
    monkeypatch.setattr(httpx, "AsyncClient", _mock_async_client(routes, calls))

    client = PolymarketClient(base_url="https://gamma.test", attempts=1)
    with pytest.raises(PolymarketError, match="ConnectError"):
        asyncio.run(client.fetch_market_by_slug("us-recession-in-2025"))
    assert len(calls) == 1


def test_transport_error_retried_when_configured(monkeypatch):
    calls = []
    routes = {"markets": httpx.ReadTimeout("slow")}
    monkeypatch.setattr(httpx, "AsyncClient", _mock_async_client(routes, calls))

    client = PolymarketClient(base_url="https://gamma.test", attempts=2)
    with pytest.raises(PolymarketError):
        asyncio.run(client.fetch_market_by_slug("us-recession-in-2025"))
    assert len(calls) == 2
