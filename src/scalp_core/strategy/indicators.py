"""Technical indicators — pure functions on price series.

Every series function returns a list aligned with its input. A slot is None
until the trailing window ending at that bar is full.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from scalp_core.models import AnnotatedCandle, Candle

Series = list[float | None]

EMA_FAST = 5
EMA_SLOW = 10
BB_PERIOD = 20
BB_STD = 2
STOCH_K_PERIOD = 8
STOCH_SLOWING = 3
STOCH_D_PERIOD = 3
STOCH_FLAT_DEFAULT = 50.0
VOLUME_MA_PERIOD = 20
ATR_PERIOD = 14


def ema(values: Sequence[float], period: int) -> Series:
    """Exponential moving average seeded with the SMA of the first *period* values."""
    out: Series = [None] * len(values)
    if period <= 0 or len(values) < period:
        return out

    k = 2 / (period + 1)
    prev = sum(values[:period]) / period
    out[period - 1] = prev
    for i in range(period, len(values)):
        prev = values[i] * k + prev * (1 - k)
        out[i] = prev
    return out


def sma(values: Sequence[float | None], period: int) -> Series:
    """Simple moving average. A window containing None yields None."""
    out: Series = [None] * len(values)
    if period <= 0:
        return out

    for i in range(period - 1, len(values)):
        window = values[i - period + 1 : i + 1]
        if any(v is None for v in window):
            continue
        out[i] = sum(window) / period
    return out


def rolling_std(values: Sequence[float | None], period: int) -> Series:
    """Population standard deviation (divides by *period*)."""
    out: Series = [None] * len(values)
    for i, mean in enumerate(sma(values, period)):
        if mean is None:
            continue
        window = values[i - period + 1 : i + 1]
        out[i] = math.sqrt(sum((v - mean) ** 2 for v in window) / period)
    return out


def bollinger_bands(
    closes: Sequence[float],
    period: int = BB_PERIOD,
    num_std: int | float = BB_STD,
) -> tuple[Series, Series, Series, Series]:
    """Bollinger Bands (SMA +/- num_std * stdev).

    Returns ``(upper, middle, lower, width)`` series.
    """
    middle = sma(closes, period)
    std = rolling_std(closes, period)
    upper: Series = [None] * len(closes)
    lower: Series = [None] * len(closes)
    width: Series = [None] * len(closes)
    for i, (mid, sd) in enumerate(zip(middle, std)):
        if mid is None or sd is None:
            continue
        upper[i] = mid + num_std * sd
        lower[i] = mid - num_std * sd
        width[i] = upper[i] - lower[i]
    return upper, middle, lower, width


def stochastic(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    k_period: int = STOCH_K_PERIOD,
    slowing: int = STOCH_SLOWING,
    d_period: int = STOCH_D_PERIOD,
) -> tuple[Series, Series]:
    """Slow stochastic oscillator. Returns ``(slow_k, d)``.

    A flat window (highest high == lowest low) repeats the previous raw %K,
    or 50 when there is none yet.
    """
    raw: Series = [None] * len(closes)
    prev_raw: float | None = None
    for i in range(k_period - 1, len(closes)):
        highest = max(highs[i - k_period + 1 : i + 1])
        lowest = min(lows[i - k_period + 1 : i + 1])
        if highest == lowest:
            value = prev_raw if prev_raw is not None else STOCH_FLAT_DEFAULT
        else:
            value = (closes[i] - lowest) / (highest - lowest) * 100
        raw[i] = value
        prev_raw = value

    slow_k = sma(raw, slowing)
    return slow_k, sma(slow_k, d_period)


def vwap(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    volumes: Sequence[float],
) -> Series:
    """Cumulative VWAP from the first bar of the series."""
    out: Series = [None] * len(closes)
    cum_pv = 0.0
    cum_volume = 0.0
    for i in range(len(closes)):
        typical = (highs[i] + lows[i] + closes[i]) / 3
        cum_pv += typical * volumes[i]
        cum_volume += volumes[i]
        if cum_volume != 0:
            out[i] = cum_pv / cum_volume
    return out


def true_range(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
) -> list[float]:
    """True range per bar; the first bar has no previous close and uses high - low."""
    out: list[float] = []
    for i in range(len(closes)):
        if i == 0:
            out.append(highs[i] - lows[i])
            continue
        prev_close = closes[i - 1]
        out.append(max(
            highs[i] - lows[i],
            abs(highs[i] - prev_close),
            abs(lows[i] - prev_close),
        ))
    return out


def atr(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = ATR_PERIOD,
) -> Series:
    """Average True Range (Wilder's smoothing)."""
    out: Series = [None] * len(closes)
    if period <= 0 or len(closes) < period:
        return out

    tr = true_range(highs, lows, closes)

    # Seed with simple average of first *period* true ranges
    prev = sum(tr[:period]) / period
    out[period - 1] = prev
    for i in range(period, len(tr)):
        prev = (prev * (period - 1) + tr[i]) / period
        out[i] = prev
    return out


def calculate_indicators(candles: Sequence[Candle]) -> list[AnnotatedCandle]:
    """Annotate a candle series (oldest first) with every indicator.

    Indicators are recomputed from OHLCV alone, so feeding the output back in
    reproduces the same values. Context fields already on an input
    AnnotatedCandle are kept.
    """
    if not candles:
        return []

    highs = [c.high for c in candles]
    lows = [c.low for c in candles]
    closes = [c.close for c in candles]
    volumes = [c.volume for c in candles]

    ema5 = ema(closes, EMA_FAST)
    ema10 = ema(closes, EMA_SLOW)
    bb_upper, bb_middle, bb_lower, bb_width = bollinger_bands(closes)
    stoch_k, stoch_d = stochastic(highs, lows, closes)
    vma20 = sma(volumes, VOLUME_MA_PERIOD)
    vwap_series = vwap(highs, lows, closes, volumes)
    atr14 = atr(highs, lows, closes)

    annotated: list[AnnotatedCandle] = []
    for i, candle in enumerate(candles):
        base = candle if isinstance(candle, AnnotatedCandle) else AnnotatedCandle(**candle.model_dump())
        annotated.append(base.model_copy(update={
            "ema5": ema5[i],
            "ema10": ema10[i],
            "bb_upper": bb_upper[i],
            "bb_middle": bb_middle[i],
            "bb_lower": bb_lower[i],
            "bb_width": bb_width[i],
            "stoch_k": stoch_k[i],
            "stoch_d": stoch_d[i],
            "vma20": vma20[i],
            "vwap": vwap_series[i],
            "atr14": atr14[i],
        }))
    return annotated
