"""Delivery of finished submissions to the destination chat."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from aiogram.exceptions import TelegramAPIError
from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    InputMediaPhoto,
    ReplyParameters,
)
from aiogram.utils.text_decorations import html_decoration

from core import get_logger
from core.constants import TelegramLimits
from core.exceptions import DispatchError
from services.submissions import FinishedSubmission

if TYPE_CHECKING:
    from aiogram import Bot

logger = get_logger(__name__)

ELLIPSIS = "…"


def utf16_length(text: str) -> int:
    """Length as Telegram counts it: in UTF-16 code units."""
    return len(text.encode("utf-16-le")) // 2


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` UTF-16 code units, ending with an ellipsis.

    A surrogate pair left half inside the budget is dropped whole.
    """
    if utf16_length(text) <= limit:
        return text
    budget = max(limit - utf16_length(ELLIPSIS), 0)
    head = text.encode("utf-16-le")[:budget * 2].decode("utf-16-le", errors="ignore")
    return head + ELLIPSIS


def render_header(submission: FinishedSubmission) -> str:
    """``"Проблема от @user:"`` style first line of the destination message."""
    name = html_decoration.quote(submission.submitter_display_name)
    return f"{submission.category.label} от {name}:"


def render_text(submission: FinishedSubmission, limit: int) -> str:
    """Header, blank line and the submission text, fitted into ``limit``.

    Telegram counts length in UTF-16 units after HTML parsing, so the raw
    text is measured and truncated before escaping.
    """
    header_length = utf16_length(f"{submission.category.label} от {submission.submitter_display_name}:\n\n")
    body = truncate(submission.text, max(limit - header_length, utf16_length(ELLIPSIS)))
    return f"{render_header(submission)}\n\n{html_decoration.quote(body)}"


def user_link_keyboard(user_id: int) -> InlineKeyboardMarkup:
    """Inline button leading back to the submitter's profile."""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="Перейти к пользователю", url=f"tg://user?id={user_id}")]
    ])


class SubmissionDispatcher:
    """Renders a finished submission and sends it to the destination chat.

    Message shape depends on the number of photos:

    * none: a single text message with the user link button;
    * one: a photo with the text as its caption and the user link button;
    * several: a media group captioned on the first photo, followed by the
      header line as a reply to the group carrying the user link button
      (media groups cannot have inline keyboards).
    """

    def __init__(self, bot: Bot, chat_id: int):
        self.bot = bot
        self.chat_id = chat_id

    async def dispatch(self, submission: FinishedSubmission) -> None:
        """Deliver a submission.

        Raises:
            DispatchError: If Telegram rejected any of the messages
        """
        keyboard = user_link_keyboard(submission.submitter_id)
        try:
            if not submission.photos:
                await self._send_text(submission, keyboard)
            elif len(submission.photos) == 1:
                await self._send_photo(submission, keyboard)
            else:
                await self._send_album(submission, keyboard)
        except TelegramAPIError as e:
            raise DispatchError(submission.submitter_id, str(e)) from e

        logger.info(
            f"Delivered {submission.category.value} from user {submission.submitter_id} "
            f"to chat {self.chat_id}",
            extra={"user_id": submission.submitter_id, "chat_id": self.chat_id},
        )

    async def _send_text(self, submission: FinishedSubmission, keyboard: InlineKeyboardMarkup) -> None:
        await self.bot.send_message(
            self.chat_id,
            render_text(submission, TelegramLimits.MESSAGE_MAX_LENGTH),
            reply_markup=keyboard,
        )

    async def _send_photo(self, submission: FinishedSubmission, keyboard: InlineKeyboardMarkup) -> None:
        await self.bot.send_photo(
            self.chat_id,
            photo=submission.photos[0],
            caption=render_text(submission, TelegramLimits.CAPTION_MAX_LENGTH),
            reply_markup=keyboard,
        )

    async def _send_album(self, submission: FinishedSubmission, keyboard: InlineKeyboardMarkup) -> None:
        caption = render_text(submission, TelegramLimits.CAPTION_MAX_LENGTH)
        media: List[InputMediaPhoto] = [
            InputMediaPhoto(media=file_id, caption=caption if index == 0 else None)
            for index, file_id in enumerate(submission.photos)
        ]
        messages = await self.bot.send_media_group(self.chat_id, media=media)

        if not messages:
            logger.warning(f"Media group for user {submission.submitter_id} returned no messages")
            return

        await self.bot.send_message(
            self.chat_id,
            render_header(submission),
            reply_parameters=ReplyParameters(message_id=messages[0].message_id),
            reply_markup=keyboard,
        )
