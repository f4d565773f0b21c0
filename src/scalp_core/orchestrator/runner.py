"""Orchestrator runner — main async loop that evaluates the signal on a tick."""

from __future__ import annotations

import argparse
import asyncio

import structlog

from scalp_core.config.loader import load_config
from scalp_core.config.schema import AppConfig
from scalp_core.db.engine import init_engine, session_scope
from scalp_core.exchange.gateio import GateIOClient
from scalp_core.exchange.sentiment import FearGreedClient
from scalp_core.logging.setup import setup_logging_from_config
from scalp_core.models import SignalSnapshot
from scalp_core.orchestrator.fetch import fetch_inputs
from scalp_core.orchestrator.persistence import persist_snapshot
from scalp_core.orchestrator.pipeline import evaluate_signal

log = structlog.get_logger("orchestrator")


def build_clients(config: AppConfig) -> tuple[GateIOClient, FearGreedClient]:
    gate = GateIOClient(
        base_url=config.exchange.base_url,
        settle=config.exchange.settle,
        api_key=config.exchange.api_key,
        api_secret=config.exchange.api_secret,
    )
    return gate, FearGreedClient(base_url=config.sentiment.base_url)


async def run_once(
    config: AppConfig,
    gate: GateIOClient,
    fng: FearGreedClient,
) -> SignalSnapshot:
    """Fetch, evaluate and log a single signal snapshot (not persisted)."""
    inputs = await fetch_inputs(gate, fng, config.exchange)
    snapshot = evaluate_signal(inputs, config.thresholds)
    opening = snapshot.opening_signal
    log.info(
        "signal_evaluated",
        contract=snapshot.contract,
        price=snapshot.price,
        position_status=snapshot.position_status,
        long_score=opening.long_score if opening else None,
        short_score=opening.short_score if opening else None,
        holdability=snapshot.holdability.score if snapshot.holdability else None,
        action=snapshot.recommendation.action,
        level=snapshot.recommendation.level,
    )
    return snapshot


def _persist(snapshot: SignalSnapshot) -> int:
    with session_scope() as session:
        return persist_snapshot(session, snapshot)


async def run_loop(config: AppConfig, once: bool = False) -> None:
    """Main loop — evaluate, persist, sleep for the poll interval."""
    init_engine(config.database.url)
    gate, fng = build_clients(config)

    log.info(
        "orchestrator_started",
        contract=config.exchange.contract,
        reference=config.exchange.reference_contract,
        poll_interval_s=config.exchange.poll_interval_s,
    )

    try:
        while True:
            try:
                snapshot = await run_once(config, gate, fng)
                row_id = _persist(snapshot)
                log.info("signal_persisted", signal_id=row_id)
            except Exception:
                log.exception("tick_error")

            if once:
                break
            await asyncio.sleep(config.exchange.poll_interval_s)
    finally:
        await gate.close()
        await fng.close()


def main(config_path: str | None = None, once: bool = False) -> None:
    """Entry point — load config, set up logging, run the async loop."""
    config = load_config(config_path)
    setup_logging_from_config(config.logging)
    asyncio.run(run_loop(config, once=once))


def cli(argv: list[str] | None = None) -> None:
    """Command-line entry: ``--config path`` and ``--once``."""
    parser = argparse.ArgumentParser(description="Signal orchestrator")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--once", action="store_true", help="Evaluate a single tick and exit")
    args = parser.parse_args(argv)
    main(config_path=args.config, once=args.once)
