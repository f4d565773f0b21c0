"""Signal persistence — write SignalSnapshot models to the signals table."""

from __future__ import annotations

from sqlalchemy import desc
from sqlalchemy.orm import Session

from scalp_core.db.tables.signals import SignalRow
from scalp_core.models import SignalSnapshot


def persist_snapshot(session: Session, snapshot: SignalSnapshot) -> int:
    """Insert a SignalSnapshot and return the row id."""
    opening = snapshot.opening_signal
    row = SignalRow(
        ts=snapshot.ts,
        contract=snapshot.contract,
        position_status=snapshot.position_status,
        price=snapshot.price,
        long_score=opening.long_score if opening else 0,
        short_score=opening.short_score if opening else 0,
        holdability_score=snapshot.holdability.score if snapshot.holdability else None,
        action=snapshot.recommendation.action,
        level=snapshot.recommendation.level,
        reasons=list(snapshot.recommendation.reasons),
        payload=snapshot.model_dump(mode="json"),
    )
    session.add(row)
    session.commit()
    session.refresh(row)
    return row.id


def recent_snapshots(session: Session, limit: int = 50) -> list[SignalSnapshot]:
    """Most recent persisted snapshots, newest first."""
    rows = (
        session.query(SignalRow)
        .order_by(desc(SignalRow.ts), desc(SignalRow.id))
        .limit(limit)
        .all()
    )
    return [SignalSnapshot.model_validate(r.payload) for r in rows]
