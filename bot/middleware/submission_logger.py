"""Middleware для логирования переходов состояния обращений."""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Message, CallbackQuery

from services.submission_store import SubmissionStore
from services.submissions import Submission


logger = logging.getLogger(__name__)


def describe_submission(submission: Optional[Submission]) -> str:
    if submission is None:
        return "none"
    text_state = "text" if submission.has_text else "no text"
    return f"{submission.category.value} ({text_state}, {submission.photo_count} photo(s))"


class SubmissionLoggingMiddleware(BaseMiddleware):
    """Логирует изменения обращения пользователя и ошибки хендлеров"""

    def __init__(self, store: SubmissionStore, log_level: int = logging.INFO):
        self.store = store
        self.log_level = log_level
        super().__init__()

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any]
    ) -> Any:

        user_id = None
        event_text = ""

        # Определяем пользователя и текст события
        if isinstance(event, Message) and event.from_user:
            user_id = event.from_user.id
            event_text = event.text or f"[{event.content_type}]"
        elif isinstance(event, CallbackQuery):
            user_id = event.from_user.id
            event_text = f"callback:{event.data}"

        if not user_id:
            return await handler(event, data)

        before = describe_submission(await self.store.get(user_id))

        try:
            result = await handler(event, data)
        except Exception as e:
            logger.error(
                f"Submission Error | User {user_id} | State: {before} | Event: {event_text[:50]} | Error: {e}"
            )
            raise

        after = describe_submission(await self.store.get(user_id))
        if before != after:
            logger.log(
                self.log_level,
                f"Submission Transition | User {user_id} | {before} → {after} | Event: {event_text[:50]}"
            )

        return result


def setup_submission_middleware(dispatcher, store: SubmissionStore) -> None:
    """Настройка middleware логирования обращений"""
    middleware = SubmissionLoggingMiddleware(store)
    dispatcher.message.middleware(middleware)
    dispatcher.callback_query.middleware(middleware)

    logger.info("Submission middleware configured")
