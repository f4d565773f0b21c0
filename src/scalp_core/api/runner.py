#!/usr/bin/env python3
"""FastAPI server runner."""

import argparse

import uvicorn
import structlog

from scalp_core.logging.setup import setup_logging_from_config
from scalp_core.api.app import app, config

logger = structlog.get_logger()


def main():
    """Run the FastAPI server."""
    parser = argparse.ArgumentParser(description="Signal API server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    setup_logging_from_config(config.logging)

    logger.info("Starting FastAPI server", host=args.host, port=args.port)

    try:
        uvicorn.run(
            app,
            host=args.host,
            port=args.port,
            log_config=None  # Use our structlog setup
        )
    except Exception as e:
        logger.error("Failed to start server", error=str(e))
        raise


if __name__ == "__main__":
    main()
