"""Indicator, scoring and decision pipeline."""

from scalp_core.strategy.holdability import score_holdability
from scalp_core.strategy.indicators import calculate_indicators
from scalp_core.strategy.opening import score_opening_signal
from scalp_core.strategy.recommendation import (
    RecommendationRequest,
    evaluate,
    generate_recommendation,
)

__all__ = [
    "RecommendationRequest",
    "calculate_indicators",
    "evaluate",
    "generate_recommendation",
    "score_holdability",
    "score_opening_signal",
]
