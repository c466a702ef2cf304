"""
Main entry point for the Carousell Watch system.
"""

import asyncio
import os
import sys
from typing import List, Optional

from .orchestrator import run_watch
from .utils.error_handling import WatcherError
from .utils.logging import get_logger, setup_logging


async def async_main(config_path: Optional[str] = None) -> int:
    """Run one watcher pass and return the process exit status."""
    setup_logging(
        log_dir=os.environ.get("LOG_DIR", "logs"),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
    )
    logger = get_logger("main")

    logger.info("Starting Carousell Watch run", extra={"config_path": config_path})

    try:
        await run_watch(config_path)
    except WatcherError as e:
        logger.error("Run failed", extra={"error": str(e), "error_type": type(e).__name__}, exc_info=True)
        return 1
    except Exception as e:
        logger.critical("Run crashed", extra={"error": str(e)}, exc_info=True)
        return 1

    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main application entry point."""
    args = sys.argv[1:] if argv is None else argv
    config_path = args[0] if args else None

    try:
        exit_code = asyncio.run(async_main(config_path))
    except KeyboardInterrupt:
        print("\nShutdown requested by user")
        exit_code = 130

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
