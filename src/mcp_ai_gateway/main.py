"""
MCP AI Gateway entry point.

Loads configuration from the environment and serves the gateway over
stdio. Logs go to stderr; stdout carries the MCP stream.
"""

import os
import sys
import asyncio
import logging

from .core.config import load_config
from .core.errors import GatewayConfigurationError
from .server import GatewayServer

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config()
    except GatewayConfigurationError as e:
        logger.error(f"Invalid configuration: {e.message}")
        sys.exit(1)

    logger.info(f"Loaded configuration: {config!r}")

    try:
        asyncio.run(GatewayServer(config).run())
    except KeyboardInterrupt:
        logger.info("Shutting down")


if __name__ == "__main__":
    main()
