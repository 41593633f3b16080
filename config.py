"""Application configuration module.

Reads settings from environment variables (and an optional ``.env`` file)
with defaults matching the intake rules of the bot.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from core.constants import DispatchDefaults, SubmissionDefaults
from core.exceptions import ConfigurationError
from core.logger import get_logger

logger = get_logger(__name__)


def _get_bool(name: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _get_int(name: str, default: int) -> int:
    """Get integer from environment variable with fallback."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"{name}={value!r} is not an integer, using {default}")
        return default


def _get_str(name: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.getenv(name, default)


@dataclass(frozen=True)
class Config:
    bot_token: str
    group_id: int
    submission_ttl_minutes: int
    sweep_interval_minutes: int
    dispatch_rate_limit: int
    dispatch_workers: int
    message_queue_size: int
    log_level: str
    log_file: Optional[str]
    log_colored: bool


def load_config(env_file: Optional[str] = None) -> Config:
    """Load application configuration from environment variables.

    Missing credentials only produce warnings here; ``validate_config``
    decides whether the process may start.

    Args:
        env_file: Optional path to a ``.env`` file (defaults to lookup
            from the working directory)

    Returns:
        Config: Application configuration
    """
    if not load_dotenv(env_file):
        logger.debug("No .env file loaded, using process environment only")

    config = Config(
        bot_token=_get_str("TELEGRAM_BOT_TOKEN"),
        group_id=_get_int("GROUP", 0),
        submission_ttl_minutes=_get_int("SUBMISSION_TTL_MINUTES", SubmissionDefaults.TTL_MINUTES),
        sweep_interval_minutes=_get_int("SWEEP_INTERVAL_MINUTES", SubmissionDefaults.SWEEP_INTERVAL_MINUTES),
        dispatch_rate_limit=_get_int("DISPATCH_RATE_LIMIT", DispatchDefaults.RATE_LIMIT),
        dispatch_workers=_get_int("DISPATCH_WORKERS", DispatchDefaults.WORKERS),
        message_queue_size=_get_int("MESSAGE_QUEUE_SIZE", DispatchDefaults.QUEUE_SIZE),
        log_level=_get_str("LOG_LEVEL", "INFO"),
        log_file=_get_str("LOG_FILE", "logs/bot.log") or None,
        log_colored=_get_bool("LOG_COLORED", True),
    )

    if not config.bot_token:
        logger.warning("bot token not set")
    if not config.group_id:
        logger.warning("group not set")

    return config


def validate_config(config: Config) -> None:
    """Check that the bot can actually run with this configuration.

    Raises:
        ConfigurationError: If credentials are missing or intervals are invalid
    """
    if not config.bot_token:
        raise ConfigurationError("TELEGRAM_BOT_TOKEN is required")
    if not config.group_id:
        raise ConfigurationError("GROUP must be set to the destination chat id")
    if config.submission_ttl_minutes <= 0:
        raise ConfigurationError("SUBMISSION_TTL_MINUTES must be positive")
    if config.sweep_interval_minutes <= 0:
        raise ConfigurationError("SWEEP_INTERVAL_MINUTES must be positive")
    if config.dispatch_workers <= 0:
        raise ConfigurationError("DISPATCH_WORKERS must be positive")
    if config.dispatch_rate_limit <= 0:
        raise ConfigurationError("DISPATCH_RATE_LIMIT must be positive")
