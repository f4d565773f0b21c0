"""Market data models — candles, annotated candles, macro context."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Trend = Literal["up", "down", "flat"]

INDICATOR_FIELDS = (
    "ema5",
    "ema10",
    "bb_upper",
    "bb_middle",
    "bb_lower",
    "bb_width",
    "stoch_k",
    "stoch_d",
    "vma20",
    "vwap",
    "atr14",
)

CONTEXT_FIELDS = ("ema15", "btc_close", "eth_close", "ema15_trend")


class Candle(BaseModel):
    """One candlestick bar. ``timestamp`` is the bar open time in ms."""

    model_config = ConfigDict(frozen=True)

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float


class AnnotatedCandle(Candle):
    """A candle plus the indicator values defined at that bar.

    An indicator is None until its lookback window is full. Context fields
    come from other instruments or timeframes and are attached afterwards by
    :mod:`scalp_core.strategy.context`.
    """

    ema5: float | None = None
    ema10: float | None = None
    bb_upper: float | None = None
    bb_middle: float | None = None
    bb_lower: float | None = None
    bb_width: float | None = None
    stoch_k: float | None = None
    stoch_d: float | None = None
    vma20: float | None = None
    vwap: float | None = None
    atr14: float | None = None

    ema15: float | None = None
    btc_close: float | None = None
    eth_close: float | None = None
    ema15_trend: Trend | None = None

    def ohlcv(self) -> Candle:
        """Strip indicators and context, returning the bare candle."""
        return Candle(
            timestamp=self.timestamp,
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            volume=self.volume,
        )


class MarketContext(BaseModel):
    """Macro context for a decision. Any field may be missing upstream."""

    model_config = ConfigDict(frozen=True)

    fng_value: int | None = None
    fng_classification: str | None = None
    btc_daily_trend: Trend | None = None
    btc_daily_ema50: float | None = None
