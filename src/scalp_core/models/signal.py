"""Score and recommendation models — emitted by the strategy pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from scalp_core.models.market import MarketContext, Trend
from scalp_core.models.position import PositionInfo, PositionStatus, Side

Level = Literal["High", "Medium", "Low"]


class ScoreDetail(BaseModel):
    """One scored condition. ``score`` is the weight awarded when met."""

    model_config = ConfigDict(frozen=True)

    condition: str
    met: bool
    score: int = Field(ge=0)


def total_score(details: list[ScoreDetail]) -> int:
    return sum(d.score for d in details if d.met)


class _ScoredModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0)
    details: list[ScoreDetail] = Field(default_factory=list)

    @model_validator(mode="after")
    def _score_matches_details(self) -> _ScoredModel:
        expected = total_score(self.details)
        if self.score != expected:
            raise ValueError(f"score {self.score} does not match met details ({expected})")
        return self


class OpeningScore(_ScoredModel):
    """Opening-signal result for one direction."""

    direction: Side
    reasons: list[str] = Field(default_factory=list)
    types: list[str] = Field(default_factory=list)


class HoldabilityScore(_ScoredModel):
    """How safe it is to keep holding the open position (0-9)."""


class OpeningSignalSummary(BaseModel):
    """Both directions' opening scores, as consumed by the decision engine."""

    model_config = ConfigDict(frozen=True)

    long_score: int
    short_score: int
    long_reasons: list[str] = Field(default_factory=list)
    long_types: list[str] = Field(default_factory=list)
    long_details: list[ScoreDetail] = Field(default_factory=list)
    short_reasons: list[str] = Field(default_factory=list)
    short_types: list[str] = Field(default_factory=list)
    short_details: list[ScoreDetail] = Field(default_factory=list)
    ema15m_trend: Trend | None = None

    @classmethod
    def from_scores(
        cls,
        long: OpeningScore,
        short: OpeningScore,
        ema15m_trend: Trend | None = None,
    ) -> OpeningSignalSummary:
        return cls(
            long_score=long.score,
            short_score=short.score,
            long_reasons=long.reasons,
            long_types=long.types,
            long_details=long.details,
            short_reasons=short.reasons,
            short_types=short.types,
            short_details=short.details,
            ema15m_trend=ema15m_trend,
        )


class Recommendation(BaseModel):
    """The single recommended action with its reasons, most decisive first."""

    model_config = ConfigDict(frozen=True)

    action: str
    reasons: list[str] = Field(default_factory=list)
    level: Level | None = None


class SignalSnapshot(BaseModel):
    """Everything one pipeline evaluation produced, for logging and audit."""

    model_config = ConfigDict(frozen=True)

    ts: datetime
    contract: str
    price: float | None = None
    position_status: PositionStatus
    position: PositionInfo | None = None
    opening_signal: OpeningSignalSummary | None = None
    holdability: HoldabilityScore | None = None
    market_context: MarketContext
    recommendation: Recommendation
    metadata: dict[str, Any] = Field(default_factory=dict)
