"""Cross-instrument and higher-timeframe context for annotated series.

Context is composed onto new AnnotatedCandle values; inputs are never mutated.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Sequence

from scalp_core.models import AnnotatedCandle, Candle, Trend
from scalp_core.strategy.indicators import calculate_indicators, ema

HTF_EMA_PERIOD = 15
DAILY_EMA_PERIOD = 50
DAILY_TREND_BAND = 0.001  # 0.1% either side of EMA50 counts as flat


def _slope(values: Sequence[float | None], i: int) -> Trend | None:
    if i == 0 or values[i] is None or values[i - 1] is None:
        return None
    if values[i] > values[i - 1]:
        return "up"
    if values[i] < values[i - 1]:
        return "down"
    return "flat"


def attach_htf_ema(candles: Sequence[Candle]) -> list[AnnotatedCandle]:
    """Annotate a higher-timeframe series and attach its EMA15 and slope tag."""
    annotated = calculate_indicators(candles)
    ema15 = ema([c.close for c in annotated], HTF_EMA_PERIOD)
    return [
        c.model_copy(update={"ema15": ema15[i], "ema15_trend": _slope(ema15, i)})
        for i, c in enumerate(annotated)
    ]


def htf_trend(htf: Sequence[AnnotatedCandle]) -> Trend | None:
    """Trend tag of the newest higher-timeframe bar."""
    if not htf:
        return None
    return htf[-1].ema15_trend


def _align_closes(
    primary: Sequence[Candle],
    reference: Sequence[Candle],
) -> list[float | None]:
    """Reference close per primary bar, matched by timestamp.

    When no timestamps line up at all the two series are aligned from the
    newest bar backwards.
    """
    by_ts = {c.timestamp: c.close for c in reference}
    if any(c.timestamp in by_ts for c in primary):
        return [by_ts.get(c.timestamp) for c in primary]

    offset = len(reference) - len(primary)
    return [
        reference[i + offset].close if 0 <= i + offset < len(reference) else None
        for i in range(len(primary))
    ]


def attach_context(
    primary: Sequence[AnnotatedCandle],
    *,
    reference: Sequence[Candle] | None = None,
    htf: Sequence[AnnotatedCandle] | None = None,
    reference_field: str = "btc_close",
    primary_field: str = "eth_close",
) -> list[AnnotatedCandle]:
    """Return *primary* with reference closes and the 15m EMA/trend attached.

    Each primary bar takes the EMA of the latest higher-timeframe bar that
    opened at or before it.
    """
    ref_closes = _align_closes(primary, reference) if reference else [None] * len(primary)

    htf_ts = [c.timestamp for c in htf] if htf else []

    out: list[AnnotatedCandle] = []
    for i, candle in enumerate(primary):
        update: dict = {primary_field: candle.close}
        if reference:
            update[reference_field] = ref_closes[i]
        if htf:
            j = bisect_right(htf_ts, candle.timestamp) - 1
            if j >= 0:
                update["ema15"] = htf[j].ema15
                update["ema15_trend"] = htf[j].ema15_trend
            else:
                update["ema15"] = None
                update["ema15_trend"] = None
        out.append(candle.model_copy(update=update))
    return out


def classify_daily_trend(
    daily: Sequence[Candle],
    period: int = DAILY_EMA_PERIOD,
    band: float = DAILY_TREND_BAND,
) -> tuple[Trend | None, float | None]:
    """BTC daily trend vs its EMA50. Returns ``(trend, ema50)``."""
    closes = [c.close for c in daily]
    series = ema(closes, period)
    if not series or series[-1] is None:
        return None, None

    ema50 = series[-1]
    last = closes[-1]
    if last > ema50 * (1 + band):
        return "up", ema50
    if last < ema50 * (1 - band):
        return "down", ema50
    return "flat", ema50
