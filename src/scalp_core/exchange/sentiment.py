"""Crypto Fear & Greed index client (alternative.me)."""

from __future__ import annotations

import httpx


class FearGreedClient:
    """Async client for the alternative.me Fear & Greed index."""

    def __init__(
        self,
        base_url: str = "https://api.alternative.me",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=15.0, transport=self._transport)
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    async def get_index(self) -> tuple[int | None, str | None]:
        """Latest reading as ``(value, classification)``; missing parts are None."""
        http = await self._get_http()
        resp = await http.get(f"{self.base_url}/fng/", params={"limit": 1})
        resp.raise_for_status()
        return self.parse_index(resp.json())

    @staticmethod
    def parse_index(body: dict) -> tuple[int | None, str | None]:
        data = body.get("data") or []
        if not data:
            return None, None
        latest = data[0]
        try:
            value = int(latest.get("value"))
        except (TypeError, ValueError):
            value = None
        return value, latest.get("value_classification")
