"""Application initialization orchestrator."""

from __future__ import annotations

import asyncio
from contextlib import suppress
from typing import Optional

from config import Config, load_config, validate_config
from core.logger import get_logger
from services.submission_store import SubmissionStore, SubmissionSweeper

logger = get_logger(__name__)


class ApplicationInitializer:
    """Orchestrates application initialization and lifecycle."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or load_config()
        self.store: Optional[SubmissionStore] = None
        self.sweeper: Optional[SubmissionSweeper] = None
        self.bot = None
        self.intake = None

    async def initialize(self) -> None:
        """Initialize all application components.

        Raises:
            ConfigurationError: If the bot cannot run with the current config
        """
        validate_config(self.config)

        self.store = SubmissionStore()
        self.sweeper = SubmissionSweeper(
            self.store,
            interval_minutes=self.config.sweep_interval_minutes,
            max_age_minutes=self.config.submission_ttl_minutes,
        )
        logger.info("✅ Submission store initialized")

        await self._init_bot()

    async def run(self) -> None:
        """Run the application until polling stops."""
        await self.sweeper.start()
        logger.info("🧹 Submission sweeper started")

        bot_task = asyncio.create_task(self.bot.start())
        logger.info("🤖 Telegram bot started")

        try:
            await bot_task
        finally:
            await self.cleanup()

    async def cleanup(self) -> None:
        """Cleanup resources."""
        with suppress(Exception):
            if self.bot:
                await self.bot.stop()
        with suppress(Exception):
            if self.sweeper:
                await self.sweeper.stop()

    async def _init_bot(self) -> None:
        """Initialize Telegram bot."""
        from bot.initializer import BotInitializer
        bot_init = BotInitializer(self.config, self.store)
        self.bot = await bot_init.initialize()
        self.intake = bot_init.intake
        logger.info("✅ Bot initialized successfully")
