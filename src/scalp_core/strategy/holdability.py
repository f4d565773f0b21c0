"""Holdability scorer — how safe it is to keep an open position (0-9)."""

from __future__ import annotations

import math
from collections.abc import Sequence

import structlog

from scalp_core.models import (
    AnnotatedCandle,
    Candle,
    HoldabilityScore,
    PositionInfo,
    ScoreDetail,
    total_score,
)

log = structlog.get_logger(__name__)

ADVERSE_BODY_ATR_MULT = 1.0
ADVERSE_VOLUME_MULT = 1.5
ATR_MA_PERIOD = 20
ENTRY_ATR_OFFSET = 0.5
LIQUIDATION_MIN_DISTANCE = 300
MAX_HOLDABILITY_SCORE = 9

INSUFFICIENT = "position or data insufficient"


def _structure_intact(close: float, ema15: float | None, position: PositionInfo) -> bool:
    if ema15 is None:
        return False
    if position.side == "long":
        return close > ema15
    return close < ema15


def _no_adverse_bar(latest: AnnotatedCandle, position: PositionInfo) -> bool:
    """True unless the last bar was a large, high-volume bar against the position."""
    if latest.close > latest.open:
        bar_side = "long"
    elif latest.close < latest.open:
        bar_side = "short"
    else:
        return True
    if bar_side == position.side:
        return True

    # Missing VMA20 counts as infinite so the volume test cannot fire.
    vma20 = latest.vma20 if latest.vma20 is not None else math.inf
    big_volume = latest.volume > ADVERSE_VOLUME_MULT * vma20
    big_body = (
        latest.atr14 is not None
        and abs(latest.close - latest.open) > ADVERSE_BODY_ATR_MULT * latest.atr14
    )
    return not (big_volume and big_body)


def _ranging(candles: Sequence[AnnotatedCandle]) -> bool:
    current = candles[-1].atr14
    history = [c.atr14 for c in candles[-ATR_MA_PERIOD:] if c.atr14 is not None]
    if current is None or len(history) < ATR_MA_PERIOD:
        return False
    return current < sum(history) / ATR_MA_PERIOD


def _entry_location(latest: AnnotatedCandle, position: PositionInfo) -> bool:
    if latest.atr14 is None:
        return False
    offset = ENTRY_ATR_OFFSET * latest.atr14
    if position.side == "long":
        return latest.bb_lower is not None and position.entry_price < latest.bb_lower + offset
    return latest.bb_upper is not None and position.entry_price > latest.bb_upper - offset


def _liquidation_safe(close: float, position: PositionInfo) -> bool:
    if position.liquidation_price is None:
        return False
    return abs(close - position.liquidation_price) >= LIQUIDATION_MIN_DISTANCE


def _moves_together(primary: Sequence[Candle], reference: Sequence[Candle]) -> bool:
    primary_up = primary[-1].close > primary[-2].close
    reference_up = reference[-1].close > reference[-2].close
    return primary_up == reference_up


def score_holdability(
    candles: Sequence[AnnotatedCandle],
    position: PositionInfo | None,
    reference: Sequence[Candle],
    htf: Sequence[AnnotatedCandle],
) -> HoldabilityScore:
    """Score the open *position* against the newest primary bar.

    Args:
        candles: Primary 1m series with indicators.
        position: The open position, or None when flat.
        reference: Reference instrument (BTC) candles, newest last.
        htf: 15m primary series with ``ema15`` attached.
    """
    if position is None or len(candles) < 2 or len(reference) < 2 or len(htf) < 2:
        return HoldabilityScore(
            score=0,
            details=[ScoreDetail(condition=INSUFFICIENT, met=False, score=0)],
        )

    latest = candles[-1]
    close = latest.close

    details = [
        ScoreDetail(
            condition="structure intact vs 15m EMA",
            met=_structure_intact(close, htf[-1].ema15, position),
            score=2,
        ),
        ScoreDetail(
            condition="no high-volume adverse bar",
            met=_no_adverse_bar(latest, position),
            score=2,
        ),
        ScoreDetail(
            condition="ranging regime (ATR < ATR MA20)",
            met=_ranging(candles),
            score=1,
        ),
        ScoreDetail(
            condition="entry near support/resistance (BBands +/- 0.5 ATR)",
            met=_entry_location(latest, position),
            score=2,
        ),
        ScoreDetail(
            condition=f"liquidation distance >= {LIQUIDATION_MIN_DISTANCE}",
            met=_liquidation_safe(close, position),
            score=1,
        ),
        ScoreDetail(
            condition="ETH and BTC moving together (last bar)",
            met=_moves_together(candles, reference),
            score=1,
        ),
    ]

    score = total_score(details)
    log.debug("holdability_scored", side=position.side, score=score)
    return HoldabilityScore(score=score, details=details)
