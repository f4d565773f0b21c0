"""SQLAlchemy ORM model for the signal history table."""

from sqlalchemy import BigInteger, Float, Integer, JSON, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from scalp_core.db.base import Base


class SignalRow(Base):
    __tablename__ = "signals"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True,
    )
    ts: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    contract: Mapped[str] = mapped_column(Text, nullable=False)
    position_status: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    long_score: Mapped[int] = mapped_column(Integer, nullable=False)
    short_score: Mapped[int] = mapped_column(Integer, nullable=False)
    holdability_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    action: Mapped[str] = mapped_column(Text, nullable=False)
    level: Mapped[str | None] = mapped_column(Text, nullable=True)
    reasons: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
