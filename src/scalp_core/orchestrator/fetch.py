"""Input fetching — concurrent calls to the exchange and sentiment APIs.

Every upstream failure is logged and turned into an absence; nothing here
raises into the pipeline.
"""

from __future__ import annotations

import asyncio
from typing import Any

from scalp_core.config.schema import ExchangeConfig
from scalp_core.exchange.gateio import GateIOClient
from scalp_core.exchange.sentiment import FearGreedClient
from scalp_core.logging import get_logger
from scalp_core.orchestrator.pipeline import PipelineInputs

log = get_logger(__name__)


def _or_default(name: str, result: Any, default: Any) -> Any:
    if isinstance(result, BaseException):
        log.warning("fetch_failed", source=name, error=repr(result))
        return default
    return result


async def _no_position() -> None:
    return None


async def fetch_inputs(
    gate: GateIOClient,
    fng: FearGreedClient,
    config: ExchangeConfig,
) -> PipelineInputs:
    """Fetch candles, position and sentiment concurrently."""
    private = bool(gate.api_key and gate.api_secret)

    results = await asyncio.gather(
        gate.get_candles(config.contract, config.interval, config.candle_limit),
        gate.get_candles(config.contract, config.htf_interval, config.candle_limit),
        gate.get_candles(config.reference_contract, config.interval, config.candle_limit),
        gate.get_candles(config.reference_contract, "1d", config.daily_limit),
        gate.get_position(config.contract) if private else _no_position(),
        fng.get_index(),
        return_exceptions=True,
    )
    candles, htf, reference, daily, position, index = results

    metadata: dict[str, Any] = {}
    if isinstance(position, BaseException):
        metadata["position_unavailable"] = True
    elif not private:
        metadata["position_source"] = "none"

    fng_value, fng_class = _or_default("fear_greed", index, (None, None))

    return PipelineInputs(
        contract=config.contract,
        candles=_or_default("candles", candles, []),
        htf_candles=_or_default("htf_candles", htf, []),
        reference_candles=_or_default("reference_candles", reference, []),
        reference_daily_candles=_or_default("reference_daily_candles", daily, []),
        position=_or_default("position", position, None),
        fng_value=fng_value,
        fng_classification=fng_class,
        metadata=metadata,
    )
