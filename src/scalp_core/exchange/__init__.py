"""Exchange and market-context API clients."""

from scalp_core.exchange.gateio import GateIOClient, GateIOError
from scalp_core.exchange.sentiment import FearGreedClient

__all__ = ["FearGreedClient", "GateIOClient", "GateIOError"]
