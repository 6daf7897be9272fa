"""
Entry point for the interaction bot.
"""

import asyncio
import sys

from bot.client import run_bot
from bot.config import Config
from utils.logger import get_logger, setup_logging

logger = get_logger("Main")


def main() -> int:
    """Main entry point."""
    config = Config.from_env()
    setup_logging(
        level=config.LOG_LEVEL,
        log_dir=config.LOG_DIR,
        console_output=config.LOG_TO_CONSOLE,
        file_output=config.LOG_TO_FILE,
    )

    try:
        return asyncio.run(run_bot(config))
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
        return 0
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
