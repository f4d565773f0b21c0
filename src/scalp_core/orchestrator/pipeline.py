"""Signal pipeline — indicators, both scorers and the decision, from pre-fetched data."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from pydantic import BaseModel, ConfigDict, Field

from scalp_core.config.schema import ThresholdsConfig
from scalp_core.models import (
    Candle,
    MarketContext,
    OpeningSignalSummary,
    PositionInfo,
    SignalSnapshot,
    position_status,
)
from scalp_core.strategy.context import (
    attach_context,
    attach_htf_ema,
    classify_daily_trend,
    htf_trend,
)
from scalp_core.strategy.holdability import score_holdability
from scalp_core.strategy.indicators import calculate_indicators
from scalp_core.strategy.opening import score_opening_signal
from scalp_core.strategy.recommendation import generate_recommendation

log = structlog.get_logger(__name__)


class PipelineInputs(BaseModel):
    """Everything the pipeline needs, already fetched. Missing data is empty/None."""

    model_config = ConfigDict(frozen=True)

    contract: str = "ETH_USDT"
    candles: list[Candle] = Field(default_factory=list)
    htf_candles: list[Candle] = Field(default_factory=list)
    reference_candles: list[Candle] = Field(default_factory=list)
    reference_daily_candles: list[Candle] = Field(default_factory=list)
    position: PositionInfo | None = None
    fng_value: int | None = None
    fng_classification: str | None = None
    metadata: dict = Field(default_factory=dict)


def evaluate_signal(
    inputs: PipelineInputs,
    thresholds: ThresholdsConfig | None = None,
    now: datetime | None = None,
) -> SignalSnapshot:
    """Run the full pipeline once and bundle the results."""
    primary = calculate_indicators(inputs.candles)
    reference = calculate_indicators(inputs.reference_candles)
    htf = attach_htf_ema(inputs.htf_candles)
    primary = attach_context(primary, reference=reference, htf=htf)

    summary: OpeningSignalSummary | None = None
    if len(primary) >= 2:
        summary = OpeningSignalSummary.from_scores(
            score_opening_signal(primary, "long"),
            score_opening_signal(primary, "short"),
            ema15m_trend=htf_trend(htf),
        )

    holdability = None
    if inputs.position is not None:
        holdability = score_holdability(primary, inputs.position, reference, htf)

    daily_trend, daily_ema50 = classify_daily_trend(inputs.reference_daily_candles)
    context = MarketContext(
        fng_value=inputs.fng_value,
        fng_classification=inputs.fng_classification,
        btc_daily_trend=daily_trend,
        btc_daily_ema50=daily_ema50,
    )

    status = position_status(inputs.position)
    recommendation = generate_recommendation(
        status,
        summary,
        holdability.score if holdability else None,
        holdability.details if holdability else None,
        context,
        thresholds,
    )

    log.debug(
        "pipeline_evaluated",
        contract=inputs.contract,
        candles=len(primary),
        action=recommendation.action,
    )
    return SignalSnapshot(
        ts=now or datetime.now(timezone.utc),
        contract=inputs.contract,
        price=primary[-1].close if primary else None,
        position_status=status,
        position=inputs.position,
        opening_signal=summary,
        holdability=holdability,
        market_context=context,
        recommendation=recommendation,
        metadata=dict(inputs.metadata),
    )
