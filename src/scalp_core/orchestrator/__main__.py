"""Allow running orchestrator as: python -m scalp_core.orchestrator [--config path] [--once]."""

from scalp_core.orchestrator.runner import cli

cli()
