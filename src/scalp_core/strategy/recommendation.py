"""Recommendation engine — one action from scores, position and macro context.

Stateless: every call re-derives the decision from its inputs. Checks run in
a fixed precedence and the first match wins:

    missing inputs -> awaiting data
    flat           -> open long / open short / stand aside
    holding        -> counter-signal close, then hold-risk close, then hold
"""

from __future__ import annotations

import structlog
from pydantic import BaseModel, ConfigDict

from scalp_core.config.schema import ThresholdsConfig
from scalp_core.models import (
    Level,
    MarketContext,
    OpeningSignalSummary,
    PositionStatus,
    Recommendation,
    ScoreDetail,
    Side,
)
from scalp_core.strategy.holdability import MAX_HOLDABILITY_SCORE

log = structlog.get_logger(__name__)

AWAITING_DATA = "awaiting data"
STAND_ASIDE = "stand aside"
STATE_ERROR = "state error"

BELOW_THRESHOLD = "score below threshold or direction unclear"
GREED_CAUTION = "caution: extreme greed, avoid chasing longs"
FEAR_CAUTION = "caution: extreme fear, avoid chasing shorts"
MANAGE_STOP = "manage trailing stop or protective stop"

_OPPOSITE: dict[Side, Side] = {"long": "short", "short": "long"}


class RecommendationRequest(BaseModel):
    """Immutable bundle of everything the decision depends on."""

    model_config = ConfigDict(frozen=True)

    position_status: PositionStatus
    opening_signal: OpeningSignalSummary | None = None
    holdability_score: int | None = None
    holdability_details: list[ScoreDetail] | None = None
    market_context: MarketContext | None = None


def _met_labels(details: list[ScoreDetail], fallback: list[str]) -> list[str]:
    if not details:
        return list(fallback)
    return [d.condition for d in details if d.met]


def _open_level(score: int, relaxed: bool, t: ThresholdsConfig) -> Level:
    if relaxed:
        return "Low"
    if score >= t.open_threshold + 2:
        return "High"
    return "Medium"


def _decide_flat(
    signal: OpeningSignalSummary,
    context: MarketContext,
    t: ThresholdsConfig,
) -> Recommendation:
    long_score, short_score = signal.long_score, signal.short_score
    trend = context.btc_daily_trend

    open_long = long_score >= t.open_threshold and long_score > short_score
    open_short = short_score >= t.open_threshold and short_score > long_score

    # One-point relaxation when the BTC daily trend agrees.
    relaxed_threshold = t.open_threshold - t.trend_relaxation
    relaxed_long = trend == "up" and not open_long and long_score >= relaxed_threshold
    relaxed_short = trend == "down" and not open_short and short_score >= relaxed_threshold
    open_long = open_long or relaxed_long
    open_short = open_short or relaxed_short

    fng = context.fng_value

    if open_long:
        reasons = _met_labels(signal.long_details, signal.long_reasons)
        if fng is not None and fng > t.fng_greed:
            reasons.append(GREED_CAUTION)
        return Recommendation(
            action="open long",
            reasons=reasons,
            level=_open_level(long_score, relaxed_long, t),
        )

    if open_short:
        reasons = _met_labels(signal.short_details, signal.short_reasons)
        if fng is not None and fng < t.fng_fear:
            reasons.append(FEAR_CAUTION)
        return Recommendation(
            action="open short",
            reasons=reasons,
            level=_open_level(short_score, relaxed_short, t),
        )

    reasons = [BELOW_THRESHOLD]
    if trend:
        reasons.append(f"BTC daily trend: {trend}")
    return Recommendation(action=STAND_ASIDE, reasons=reasons)


def _decide_holding(
    side: Side,
    signal: OpeningSignalSummary,
    holdability_score: int | None,
    holdability_details: list[ScoreDetail] | None,
    t: ThresholdsConfig,
) -> Recommendation:
    counter = _OPPOSITE[side]
    if counter == "short":
        counter_score = signal.short_score
        counter_labels = _met_labels(signal.short_details, signal.short_reasons)
    else:
        counter_score = signal.long_score
        counter_labels = _met_labels(signal.long_details, signal.long_reasons)

    if counter_score >= t.strong_close_threshold:
        return Recommendation(
            action=f"close {side} immediately — risk signal",
            reasons=[f"strong {counter} signal (score: {counter_score})", *counter_labels],
            level="High",
        )

    if holdability_score is not None and holdability_score < t.hold_risk_threshold:
        reasons = [f"low holdability score ({holdability_score}/{MAX_HOLDABILITY_SCORE})"]
        reasons.extend(
            f"risk: {d.condition}"
            for d in holdability_details or []
            if not d.met and d.score > 0
        )
        return Recommendation(
            action=f"consider closing {side} — high hold risk",
            reasons=reasons,
            level="Medium",
        )

    shown = holdability_score if holdability_score is not None else "N/A"
    reasons = [f"holdability score: {shown}/{MAX_HOLDABILITY_SCORE}"]
    if holdability_score is not None:
        reasons.append("key risk indicators acceptable")
    reasons.append(MANAGE_STOP)
    return Recommendation(action=f"continue holding {side} / trail stop", reasons=reasons)


def generate_recommendation(
    position_status: PositionStatus,
    opening_signal: OpeningSignalSummary | None,
    holdability_score: int | None = None,
    holdability_details: list[ScoreDetail] | None = None,
    market_context: MarketContext | None = None,
    thresholds: ThresholdsConfig | None = None,
) -> Recommendation:
    """Map position status, scores and context to a single recommendation."""
    t = thresholds or ThresholdsConfig()

    if opening_signal is None or market_context is None:
        return Recommendation(action=AWAITING_DATA, reasons=["waiting for signal data"])

    if position_status == "flat":
        rec = _decide_flat(opening_signal, market_context, t)
    elif position_status in ("long", "short"):
        rec = _decide_holding(
            position_status, opening_signal, holdability_score, holdability_details, t,
        )
    else:
        log.warning("unknown_position_status", position_status=position_status)
        return Recommendation(action=STATE_ERROR, reasons=["unrecognised position status"])

    log.debug("recommendation", position_status=position_status, action=rec.action, level=rec.level)
    return rec


def evaluate(
    request: RecommendationRequest,
    thresholds: ThresholdsConfig | None = None,
) -> Recommendation:
    """Same as :func:`generate_recommendation` over a request value."""
    return generate_recommendation(
        request.position_status,
        request.opening_signal,
        request.holdability_score,
        request.holdability_details,
        request.market_context,
        thresholds,
    )
