"""Gate.io USDT-settled futures client — REST v4."""

from __future__ import annotations

import hashlib
import hmac
import time
from typing import Any

import httpx

from scalp_core.logging import get_logger
from scalp_core.models import Candle, PositionInfo

log = get_logger(__name__)


class GateIOError(Exception):
    """Raised when a request cannot be made (e.g. missing API credentials)."""


def _to_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_candle(row: dict | list) -> Candle | None:
    """Parse one candlestick row into a Candle, or None if it is unusable.

    Gate returns objects ``{t, v, c, h, l, o}`` with ``t`` in seconds; older
    responses use arrays in the order ``[t, v, c, h, l, o]``.
    """
    if isinstance(row, dict):
        t, v, c, h, lo, o = (row.get(k) for k in ("t", "v", "c", "h", "l", "o"))
    else:
        t, v, c, h, lo, o = (list(row) + [None] * 6)[:6]

    ts = _to_float(t)
    prices = [_to_float(x) for x in (o, h, lo, c)]
    if ts is None or any(p is None for p in prices):
        return None
    volume = _to_float(v)

    return Candle(
        timestamp=int(ts * 1000),
        open=prices[0],
        high=prices[1],
        low=prices[2],
        close=prices[3],
        volume=volume if volume is not None else 0.0,
    )


def parse_position(body: dict | list) -> PositionInfo | None:
    """Turn a positions response into PositionInfo; zero size means no position.

    In dual mode Gate returns a list; the first non-empty leg wins.
    """
    rows = body if isinstance(body, list) else [body]
    for row in rows:
        size = _to_float(row.get("size")) or 0.0
        if size == 0:
            continue
        entry = _to_float(row.get("entry_price"))
        if entry is None:
            continue
        liq = _to_float(row.get("liq_price"))
        return PositionInfo(
            side="long" if size > 0 else "short",
            entry_price=entry,
            liquidation_price=liq if liq else None,
        )
    return None


class GateIOClient:
    """Async client for Gate.io's futures REST API."""

    def __init__(
        self,
        base_url: str = "https://api.gateio.ws/api/v4",
        settle: str = "usdt",
        api_key: str | None = None,
        api_secret: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.settle = settle
        self.api_key = api_key
        self.api_secret = api_secret
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=15.0, transport=self._transport)
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    def sign(self, method: str, path: str, query: str = "", body: str = "", ts: int | None = None) -> dict[str, str]:
        """Gate v4 signature headers (HMAC-SHA512 over method, path, query, body hash, ts)."""
        if not self.api_key or not self.api_secret:
            raise GateIOError("Gate.io API key and secret are required for private endpoints")
        ts = int(time.time()) if ts is None else ts
        url_path = httpx.URL(self.base_url).path.rstrip("/") + path
        hashed_body = hashlib.sha512(body.encode()).hexdigest()
        payload = f"{method.upper()}\n{url_path}\n{query}\n{hashed_body}\n{ts}"
        signature = hmac.new(self.api_secret.encode(), payload.encode(), hashlib.sha512).hexdigest()
        return {"KEY": self.api_key, "Timestamp": str(ts), "SIGN": signature}

    # --- public ---

    async def _get(self, path: str, params: dict | None = None, headers: dict | None = None) -> Any:
        http = await self._get_http()
        resp = await http.get(f"{self.base_url}{path}", params=params, headers=headers)
        resp.raise_for_status()
        return resp.json()

    async def get_candles(self, contract: str, interval: str = "1m", limit: int = 100) -> list[Candle]:
        """Fetch the latest *limit* candles, oldest first."""
        rows = await self._get(
            f"/futures/{self.settle}/candlesticks",
            params={"contract": contract, "interval": interval, "limit": limit},
        )
        candles: list[Candle] = []
        for row in rows:
            candle = parse_candle(row)
            if candle is None:
                log.warning("candle_unparseable", contract=contract, interval=interval, row=row)
                continue
            candles.append(candle)
        candles.sort(key=lambda c: c.timestamp)
        return candles

    async def list_trades(self, contract: str, limit: int = 100) -> list[dict]:
        """Latest public trades for *contract*."""
        return await self._get(
            f"/futures/{self.settle}/trades",
            params={"contract": contract, "limit": limit},
        )

    # --- private ---

    async def get_position(self, contract: str) -> PositionInfo | None:
        """Current position in *contract*, or None when flat."""
        path = f"/futures/{self.settle}/positions/{contract}"
        headers = self.sign("GET", path)
        body = await self._get(path, headers=headers)
        return parse_position(body)
