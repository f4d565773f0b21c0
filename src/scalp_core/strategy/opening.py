"""Opening-signal scorer — weighted entry conditions for one direction."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

import structlog

from scalp_core.models import AnnotatedCandle, OpeningScore, ScoreDetail, Side, total_score

log = structlog.get_logger(__name__)

VOLUME_SPIKE_MULT = 1.5
STOCH_OVERBOUGHT = 70
STOCH_OVERSOLD = 30
MAX_OPENING_SCORE = 10

INSUFFICIENT_DATA = "insufficient data"

Check = Callable[[AnnotatedCandle, AnnotatedCandle, Side], bool]


@dataclass(frozen=True)
class _Condition:
    tag: str
    weight: int
    long_label: str
    short_label: str
    check: Check

    def label(self, direction: Side) -> str:
        return self.long_label if direction == "long" else self.short_label


def _ema_aligned(latest: AnnotatedCandle, prev: AnnotatedCandle, direction: Side) -> bool:
    if latest.ema5 is None or latest.ema10 is None:
        return False
    if direction == "long":
        return latest.ema5 > latest.ema10
    return latest.ema5 < latest.ema10


def _band_breakout(latest: AnnotatedCandle, prev: AnnotatedCandle, direction: Side) -> bool:
    if direction == "long":
        return latest.bb_upper is not None and latest.close > latest.bb_upper
    return latest.bb_lower is not None and latest.close < latest.bb_lower


def _stoch_cross(latest: AnnotatedCandle, prev: AnnotatedCandle, direction: Side) -> bool:
    k, d = latest.stoch_k, latest.stoch_d
    prev_k, prev_d = prev.stoch_k, prev.stoch_d
    if k is None or d is None or prev_k is None or prev_d is None:
        return False
    if direction == "long":
        return prev_k <= prev_d and k > d and k < STOCH_OVERBOUGHT
    return prev_k >= prev_d and k < d and k > STOCH_OVERSOLD


def _volume_spike(latest: AnnotatedCandle, prev: AnnotatedCandle, direction: Side) -> bool:
    if latest.vma20 is None:
        return False
    return latest.volume > VOLUME_SPIKE_MULT * latest.vma20


def _vwap_side(latest: AnnotatedCandle, prev: AnnotatedCandle, direction: Side) -> bool:
    if latest.vwap is None:
        return False
    if direction == "long":
        return latest.close > latest.vwap
    return latest.close < latest.vwap


def _htf_trend(latest: AnnotatedCandle, prev: AnnotatedCandle, direction: Side) -> bool:
    return latest.ema15_trend == ("up" if direction == "long" else "down")


def _reference_sync(latest: AnnotatedCandle, prev: AnnotatedCandle, direction: Side) -> bool:
    if latest.btc_close is None or prev.btc_close is None:
        return False
    primary_move = latest.close - prev.close
    reference_move = latest.btc_close - prev.btc_close
    return (primary_move > 0 and reference_move > 0) or (primary_move < 0 and reference_move < 0)


# Canonical order: details are always emitted in this sequence.
CONDITIONS: tuple[_Condition, ...] = (
    _Condition("ema", 2, "EMA5 > EMA10", "EMA5 < EMA10", _ema_aligned),
    _Condition(
        "bollinger", 2,
        "close above upper Bollinger band",
        "close below lower Bollinger band",
        _band_breakout,
    ),
    _Condition(
        "stochastic", 2,
        "stochastic %K crossed above %D (not overbought)",
        "stochastic %K crossed below %D (not oversold)",
        _stoch_cross,
    ),
    _Condition("volume", 1, "volume > 1.5x VMA20", "volume > 1.5x VMA20", _volume_spike),
    _Condition("vwap", 1, "close above VWAP", "close below VWAP", _vwap_side),
    _Condition("trend", 1, "15m EMA trend up", "15m EMA trend down", _htf_trend),
    _Condition("btc_sync", 1, "BTC moving in sync", "BTC moving in sync", _reference_sync),
)


def score_opening_signal(
    candles: Sequence[AnnotatedCandle],
    direction: Side,
) -> OpeningScore:
    """Score the case for opening a position in *direction* on the newest bar.

    Returns score 0-10 with one detail per condition. With fewer than two
    candles the result is a single "insufficient data" detail.
    """
    if len(candles) < 2:
        return OpeningScore(
            direction=direction,
            score=0,
            details=[ScoreDetail(condition=INSUFFICIENT_DATA, met=False, score=0)],
        )

    latest, prev = candles[-1], candles[-2]
    details: list[ScoreDetail] = []
    reasons: list[str] = []
    types: list[str] = []

    for cond in CONDITIONS:
        label = cond.label(direction)
        met = cond.check(latest, prev, direction)
        details.append(ScoreDetail(condition=label, met=met, score=cond.weight))
        if met:
            reasons.append(label)
            types.append(cond.tag)

    score = total_score(details)
    log.debug("opening_scored", direction=direction, score=score, types=types)
    return OpeningScore(
        direction=direction,
        score=score,
        details=details,
        reasons=reasons,
        types=types,
    )
