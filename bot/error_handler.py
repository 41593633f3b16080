"""Apology replies for intake handlers that fail unexpectedly."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from aiogram.exceptions import TelegramAPIError

from core import get_logger

logger = get_logger(__name__)

RETRY_HINT = "🔄 Попробуйте ещё раз или начните заново с /start."


def handle_bot_errors(error_message: str = "Произошла ошибка"):
    """Tell the submitter their last step failed, then re-raise.

    The error is logged by ``SubmissionLoggingMiddleware`` together with the
    user's submission state, so the decorator itself only reports a failed
    apology.

    Args:
        error_message: First line of the reply sent to the user
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(self, event: Any, *args, **kwargs):
            try:
                return await func(self, event, *args, **kwargs)
            except Exception:
                # Callback queries are answered in the chat their button lives in
                target = getattr(event, "message", None) or event
                try:
                    await target.answer(f"❌ {error_message}\n\n{RETRY_HINT}")
                except TelegramAPIError as send_error:
                    logger.warning(f"Could not report failed {func.__name__} to the user: {send_error}")
                raise

        return wrapper
    return decorator
