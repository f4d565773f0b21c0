"""Tests for the exchange/sentiment clients and concurrent input fetching."""

from __future__ import annotations

import asyncio
import hashlib
import hmac

import httpx
import pytest

from scalp_core.config.schema import ExchangeConfig
from scalp_core.exchange import FearGreedClient, GateIOClient, GateIOError
from scalp_core.exchange.gateio import parse_candle, parse_position
from scalp_core.orchestrator.fetch import fetch_inputs


def _candle_rows(n: int, start: int = 1_700_000_000, step: int = 60) -> list[dict]:
    # Newest first, as a server might return them.
    return [
        {"t": start + i * step, "v": 10 + i, "c": str(3000 + i), "h": str(3002 + i), "l": str(2998 + i), "o": str(2999 + i)}
        for i in reversed(range(n))
    ]


def _gate_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path.endswith("/candlesticks"):
        return httpx.Response(200, json=_candle_rows(int(request.url.params["limit"])))
    if path.endswith("/trades"):
        return httpx.Response(200, json=[{"id": 1, "price": "3000.1", "size": 3}])
    if "/positions/" in path:
        return httpx.Response(200, json={"size": -2, "entry_price": "3050.5", "liq_price": "3400"})
    return httpx.Response(404)


def _fng_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"data": [{"value": "72", "value_classification": "Greed"}]})


class TestParseCandle:
    def test_dict_row(self):
        c = parse_candle({"t": 1_700_000_000, "v": 5, "c": "3001", "h": "3002", "l": "2999", "o": "3000"})
        assert c.timestamp == 1_700_000_000_000
        assert (c.open, c.high, c.low, c.close, c.volume) == (3000.0, 3002.0, 2999.0, 3001.0, 5.0)

    def test_array_row(self):
        c = parse_candle([1_700_000_060, "7", "3001", "3002", "2999", "3000"])
        assert c.timestamp == 1_700_000_060_000
        assert c.close == 3001.0
        assert c.volume == 7.0

    def test_bad_price_is_skipped(self):
        assert parse_candle({"t": 1, "v": 1, "c": "abc", "h": "1", "l": "1", "o": "1"}) is None

    def test_missing_timestamp_is_skipped(self):
        assert parse_candle({"v": 1, "c": "1", "h": "1", "l": "1", "o": "1"}) is None

    def test_missing_volume_defaults_to_zero(self):
        assert parse_candle({"t": 1, "c": "1", "h": "1", "l": "1", "o": "1"}).volume == 0.0


class TestParsePosition:
    def test_long(self):
        p = parse_position({"size": 3, "entry_price": "2950", "liq_price": "2600"})
        assert p.side == "long"
        assert p.entry_price == 2950.0
        assert p.liquidation_price == 2600.0

    def test_short_from_negative_size(self):
        assert parse_position({"size": -1, "entry_price": "3060", "liq_price": "3400"}).side == "short"

    def test_zero_size_is_flat(self):
        assert parse_position({"size": 0, "entry_price": "0"}) is None

    def test_zero_liquidation_price_is_unknown(self):
        assert parse_position({"size": 1, "entry_price": "3000", "liq_price": "0"}).liquidation_price is None

    def test_dual_mode_list(self):
        body = [{"size": 0, "entry_price": "0"}, {"size": -4, "entry_price": "3100"}]
        assert parse_position(body).side == "short"


class TestGateIOClient:
    def test_default_urls(self):
        c = GateIOClient(base_url="https://api.gateio.ws/api/v4/")
        assert c.base_url == "https://api.gateio.ws/api/v4"
        assert c.settle == "usdt"

    def test_sign_requires_credentials(self):
        with pytest.raises(GateIOError):
            GateIOClient().sign("GET", "/futures/usdt/positions/ETH_USDT")

    def test_sign_headers(self):
        c = GateIOClient(api_key="k", api_secret="s")
        headers = c.sign("get", "/futures/usdt/positions/ETH_USDT", ts=1_700_000_000)
        assert headers["KEY"] == "k"
        assert headers["Timestamp"] == "1700000000"

        payload = "\n".join([
            "GET",
            "/api/v4/futures/usdt/positions/ETH_USDT",
            "",
            hashlib.sha512(b"").hexdigest(),
            "1700000000",
        ])
        expected = hmac.new(b"s", payload.encode(), hashlib.sha512).hexdigest()
        assert headers["SIGN"] == expected

    def test_get_candles_sorted_oldest_first(self):
        async def run():
            client = GateIOClient(transport=httpx.MockTransport(_gate_handler))
            try:
                return await client.get_candles("ETH_USDT", "1m", 5)
            finally:
                await client.close()

        candles = asyncio.run(run())
        assert len(candles) == 5
        assert [c.timestamp for c in candles] == sorted(c.timestamp for c in candles)

    def test_get_candles_skips_bad_rows(self):
        def handler(request: httpx.Request) -> httpx.Response:
            rows = _candle_rows(3)
            rows[1]["c"] = None
            return httpx.Response(200, json=rows)

        async def run():
            client = GateIOClient(transport=httpx.MockTransport(handler))
            try:
                return await client.get_candles("ETH_USDT")
            finally:
                await client.close()

        assert len(asyncio.run(run())) == 2

    def test_http_error_raises(self):
        async def run():
            client = GateIOClient(transport=httpx.MockTransport(lambda r: httpx.Response(503)))
            try:
                await client.get_candles("ETH_USDT")
            finally:
                await client.close()

        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(run())

    def test_get_position_sends_signature(self):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return _gate_handler(request)

        async def run():
            client = GateIOClient(api_key="k", api_secret="s", transport=httpx.MockTransport(handler))
            try:
                return await client.get_position("ETH_USDT")
            finally:
                await client.close()

        position = asyncio.run(run())
        assert position.side == "short"
        assert seen["key"] == "k"
        assert "sign" in seen


class TestFearGreedClient:
    def test_parse_index(self):
        body = {"data": [{"value": "20", "value_classification": "Extreme Fear"}]}
        assert FearGreedClient.parse_index(body) == (20, "Extreme Fear")

    def test_parse_index_missing(self):
        assert FearGreedClient.parse_index({}) == (None, None)
        assert FearGreedClient.parse_index({"data": [{"value": "n/a"}]}) == (None, None)

    def test_get_index(self):
        async def run():
            client = FearGreedClient(transport=httpx.MockTransport(_fng_handler))
            try:
                return await client.get_index()
            finally:
                await client.close()

        assert asyncio.run(run()) == (72, "Greed")


class TestFetchInputs:
    def _fetch(self, gate_handler, fng_handler=_fng_handler, **gate_kwargs):
        async def run():
            gate = GateIOClient(transport=httpx.MockTransport(gate_handler), **gate_kwargs)
            fng = FearGreedClient(transport=httpx.MockTransport(fng_handler))
            try:
                return await fetch_inputs(gate, fng, ExchangeConfig(candle_limit=30, daily_limit=60))
            finally:
                await gate.close()
                await fng.close()

        return asyncio.run(run())

    def test_all_sources_ok_without_credentials(self):
        inputs = self._fetch(_gate_handler)
        assert len(inputs.candles) == 30
        assert len(inputs.htf_candles) == 30
        assert len(inputs.reference_candles) == 30
        assert len(inputs.reference_daily_candles) == 60
        assert inputs.position is None
        assert inputs.metadata == {"position_source": "none"}
        assert (inputs.fng_value, inputs.fng_classification) == (72, "Greed")

    def test_position_fetched_with_credentials(self):
        inputs = self._fetch(_gate_handler, api_key="k", api_secret="s")
        assert inputs.position.side == "short"
        assert inputs.metadata == {}

    def test_position_failure_is_flat_and_flagged(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if "/positions/" in request.url.path:
                return httpx.Response(500)
            return _gate_handler(request)

        inputs = self._fetch(handler, api_key="k", api_secret="s")
        assert inputs.position is None
        assert inputs.metadata["position_unavailable"] is True
        assert len(inputs.candles) == 30

    def test_sentiment_failure_becomes_absence(self):
        inputs = self._fetch(_gate_handler, fng_handler=lambda r: httpx.Response(502))
        assert inputs.fng_value is None
        assert inputs.fng_classification is None
        assert len(inputs.candles) == 30

    def test_candle_failure_becomes_empty(self):
        inputs = self._fetch(lambda r: httpx.Response(500))
        assert inputs.candles == []
        assert inputs.reference_daily_candles == []
