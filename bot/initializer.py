"""Bot initialization module."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Optional

from core.logger import get_logger

if TYPE_CHECKING:
    from bot.relay_bot import RelayBot
    from config import Config
    from services.intake import IntakeStateMachine
    from services.submission_store import SubmissionStore
    from services.submissions import FinishedSubmission

logger = get_logger(__name__)


class BotInitializer:
    """Handles bot initialization and handler registration."""

    def __init__(self, config: Config, store: SubmissionStore):
        self.config = config
        self.store = store
        self.intake: Optional[IntakeStateMachine] = None

    async def initialize(self) -> RelayBot:
        """Create the bot and wire the intake flow to the destination chat."""
        from bot import RelayBot
        from bot.handlers import setup_intake_handlers
        from bot.middleware import setup_submission_middleware
        from services.dispatcher import SubmissionDispatcher
        from services.intake import IntakeStateMachine

        bot = RelayBot(
            token=self.config.bot_token,
            rate_limit=self.config.dispatch_rate_limit,
            worker_count=self.config.dispatch_workers,
            message_queue_size=self.config.message_queue_size,
        )

        dispatcher = SubmissionDispatcher(bot.bot, self.config.group_id)

        async def handoff(submission: FinishedSubmission) -> None:
            await bot.enqueue(partial(dispatcher.dispatch, submission))

        self.intake = IntakeStateMachine(self.store, handoff)
        logger.info("✅ Services initialized")

        setup_intake_handlers(bot.dispatcher, self.intake)
        logger.info("✅ Handlers registered")

        setup_submission_middleware(bot.dispatcher, self.store)
        logger.info("✅ Middleware configured")

        return bot
