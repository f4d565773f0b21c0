"""FastAPI application for the signal dashboard backend."""

import os
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Generator

import httpx
import structlog
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from scalp_core.config.loader import load_config
from scalp_core.db.engine import init_engine, session_scope
from scalp_core.exchange.gateio import GateIOClient
from scalp_core.models import SignalSnapshot
from scalp_core.orchestrator.persistence import recent_snapshots
from scalp_core.orchestrator.runner import build_clients, run_once

logger = structlog.get_logger()

Evaluator = Callable[[], Awaitable[SignalSnapshot]]

app = FastAPI(
    title="Scalp Signal API",
    description="Opening/holdability scores and the recommended action for one futures contract",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Load config once at startup
config = load_config(os.environ.get("SCALP_CONFIG"))


def get_db() -> Generator[Session, None, None]:
    """Dependency to get DB session."""
    with session_scope() as session:
        yield session


def get_evaluator() -> Evaluator:
    """Dependency returning a coroutine that evaluates one live snapshot."""

    async def _evaluate() -> SignalSnapshot:
        gate, fng = build_clients(config)
        try:
            return await run_once(config, gate, fng)
        finally:
            await gate.close()
            await fng.close()

    return _evaluate


async def get_gate() -> GateIOClient:
    gate, _ = build_clients(config)
    return gate


@app.on_event("startup")
async def startup_event():
    """Initialize database engine on startup."""
    init_engine(config.database.url)
    logger.info("Database engine initialized")


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "contract": config.exchange.contract,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/signal", response_model=SignalSnapshot)
async def get_signal(evaluate: Evaluator = Depends(get_evaluator)):
    """Evaluate the pipeline against live data and return the snapshot."""
    try:
        return await evaluate()
    except Exception as e:
        logger.exception("signal_failed")
        raise HTTPException(status_code=500, detail=f"Failed to evaluate signal: {e}")


@app.get("/api/history", response_model=list[SignalSnapshot])
async def get_history(
    limit: int = Query(50, ge=1, le=500),
    session: Session = Depends(get_db),
):
    """Most recent persisted snapshots, newest first."""
    return recent_snapshots(session, limit=limit)


@app.get("/api/trades")
async def get_trades(
    limit: int = Query(100, ge=1, le=1000),
    gate: GateIOClient = Depends(get_gate),
):
    """Latest public trades for the configured contract."""
    try:
        return await gate.list_trades(config.exchange.contract, limit=limit)
    except httpx.HTTPStatusError as e:
        logger.warning("trades_failed", status=e.response.status_code)
        raise HTTPException(status_code=e.response.status_code, detail="Gate.io API error")
    except httpx.HTTPError as e:
        logger.warning("trades_failed", error=repr(e))
        raise HTTPException(status_code=502, detail="Gate.io unreachable")
    finally:
        await gate.close()
