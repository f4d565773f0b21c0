"""Pydantic domain models."""

from scalp_core.models.market import AnnotatedCandle, Candle, MarketContext, Trend
from scalp_core.models.position import PositionInfo, PositionStatus, Side, position_status
from scalp_core.models.signal import (
    HoldabilityScore,
    Level,
    OpeningScore,
    OpeningSignalSummary,
    Recommendation,
    ScoreDetail,
    SignalSnapshot,
    total_score,
)

__all__ = [
    "AnnotatedCandle",
    "Candle",
    "HoldabilityScore",
    "Level",
    "MarketContext",
    "OpeningScore",
    "OpeningSignalSummary",
    "PositionInfo",
    "PositionStatus",
    "Recommendation",
    "ScoreDetail",
    "Side",
    "SignalSnapshot",
    "Trend",
    "position_status",
    "total_score",
]
