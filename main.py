"""Application entry point."""

from __future__ import annotations

import asyncio
import sys

from config import Config, load_config
from core import ConfigurationError, get_logger, setup_logger
from core.app_initializer import ApplicationInitializer

logger = get_logger(__name__)


def configure() -> Config:
    """Load the configuration with logging in place for its warnings."""
    # Console-only logging until the configured handlers exist
    setup_logger()
    config = load_config()
    setup_logger(
        level=config.log_level,
        log_file=config.log_file,
        colored=config.log_colored,
    )
    return config


async def main(config: Config) -> None:
    """Main application entry point."""
    app = ApplicationInitializer(config)
    await app.initialize()
    await app.run()


def cli() -> None:
    config = configure()
    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        logger.info("Application stopped by user")
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
