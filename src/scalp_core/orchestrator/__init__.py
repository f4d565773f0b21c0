"""Signal orchestrator — fetches inputs, runs the pipeline, persists snapshots."""

from scalp_core.orchestrator.persistence import persist_snapshot, recent_snapshots
from scalp_core.orchestrator.pipeline import PipelineInputs, evaluate_signal

__all__ = ["PipelineInputs", "evaluate_signal", "persist_snapshot", "recent_snapshots"]
