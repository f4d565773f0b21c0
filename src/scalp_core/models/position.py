"""Open-position descriptor supplied by the position provider."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Side = Literal["long", "short"]
PositionStatus = Literal["flat", "long", "short"]


class PositionInfo(BaseModel):
    """An open futures position. Exists only while the position is open."""

    model_config = ConfigDict(frozen=True)

    side: Side
    entry_price: float
    liquidation_price: float | None = None


def position_status(position: PositionInfo | None) -> PositionStatus:
    """Map an optional position to the decision engine's status value."""
    if position is None:
        return "flat"
    return position.side
