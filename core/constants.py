"""Application-wide constants and configuration values."""

from __future__ import annotations


# Telegram limits
class TelegramLimits:
    """Telegram API limits."""
    MESSAGE_MAX_LENGTH = 4096
    CAPTION_MAX_LENGTH = 1024
    MEDIA_GROUP_MAX_SIZE = 10


# Submission constants
class SubmissionDefaults:
    """Submission intake configuration."""
    MAX_PHOTOS = 4
    TTL_MINUTES = 60
    SWEEP_INTERVAL_MINUTES = 60


# Outbound dispatch
class DispatchDefaults:
    """Default values for destination channel delivery."""
    RATE_LIMIT = 20  # messages per second
    WORKERS = 2
    QUEUE_SIZE = 100
    DRAIN_TIMEOUT_SECONDS = 10  # time given to queued sends on shutdown
