"""Handlers collecting problem reports and suggestions from users."""

from __future__ import annotations

from aiogram import F, Router, types
from aiogram.filters import Command, CommandStart

from bot.error_handler import handle_bot_errors
from bot.keyboards import get_category_keyboard
from core import get_logger
from services.intake import IntakeOutcome, IntakeStateMachine
from services.submissions import Category, Submitter

logger = get_logger(__name__)

CATEGORY_PROMPTS = {
    Category.PROBLEM_REPORT: (
        "Опишите проблему и приложите до {limit} фотографий (если нужно). "
        "Когда закончите, отправьте /done"
    ),
    Category.SUGGESTION: (
        "Опишите ваше предложение и приложите до {limit} фотографий (если нужно). "
        "Когда закончите, отправьте /done"
    ),
}

CHOOSE_ACTION = "Выберите действие:"
TEXT_ACCEPTED = "Текст принят. Можете отправить фото (до {limit}) или отправьте /done для завершения."
PHOTO_NEEDS_TEXT = "Сначала отправьте текст, а затем фотографии."
PHOTO_LIMIT_REACHED = "Вы уже прикрепили максимум фотографий ({limit}). Отправьте /done для завершения."
PHOTO_ACCEPTED = "Фото принято ({count}/{limit}). Отправьте ещё фото или /done для завершения."
SUBMISSION_SENT = "Спасибо! Ваше сообщение отправлено."


def submitter_from_user(user: types.User) -> Submitter:
    return Submitter(user_id=user.id, username=user.username, first_name=user.first_name)


class IntakeHandler:
    def __init__(self, intake: IntakeStateMachine) -> None:
        self.intake = intake
        self.router = Router(name="intake")
        self._register()

    def setup(self, dispatcher) -> None:
        dispatcher.include_router(self.router)

    def _register(self) -> None:
        self.router.message.register(self.start, CommandStart())
        self.router.message.register(self.done, Command("done"))
        self.router.callback_query.register(
            self.select_category,
            F.data.in_({category.value for category in Category}),
        )
        self.router.message.register(self.handle_photo, F.photo)
        # Unknown commands are not submission text
        self.router.message.register(self.handle_text, F.text, ~F.text.startswith("/"))

    @property
    def photo_limit(self) -> int:
        return self.intake.max_photos

    async def start(self, message: types.Message) -> None:
        await message.answer(CHOOSE_ACTION, reply_markup=get_category_keyboard())

    @handle_bot_errors("Не удалось начать обращение")
    async def select_category(self, callback: types.CallbackQuery) -> None:
        await callback.answer()

        category = Category.from_callback(callback.data)
        if category is None:
            return

        await self.intake.select(callback.from_user.id, category)
        if callback.message:
            await callback.message.answer(CATEGORY_PROMPTS[category].format(limit=self.photo_limit))

    @handle_bot_errors("Не удалось сохранить текст")
    async def handle_text(self, message: types.Message) -> None:
        result = await self.intake.text(message.from_user.id, message.text or "")
        if result.outcome is IntakeOutcome.TEXT_ACCEPTED:
            await message.answer(TEXT_ACCEPTED.format(limit=self.photo_limit))

    @handle_bot_errors("Не удалось сохранить фото")
    async def handle_photo(self, message: types.Message) -> None:
        # Telegram sends several sizes, the last one is the largest
        file_id = message.photo[-1].file_id
        result = await self.intake.photo(message.from_user.id, file_id)

        if result.outcome is IntakeOutcome.PHOTO_NEEDS_TEXT:
            await message.answer(PHOTO_NEEDS_TEXT)
        elif result.outcome is IntakeOutcome.PHOTO_LIMIT_REACHED:
            await message.answer(PHOTO_LIMIT_REACHED.format(limit=self.photo_limit))
        elif result.outcome is IntakeOutcome.PHOTO_ACCEPTED:
            await message.answer(PHOTO_ACCEPTED.format(count=result.photo_count, limit=self.photo_limit))

    @handle_bot_errors("Не удалось отправить обращение")
    async def done(self, message: types.Message) -> None:
        result = await self.intake.complete(submitter_from_user(message.from_user))
        if result.outcome is IntakeOutcome.COMPLETED:
            await message.answer(SUBMISSION_SENT)


def setup_intake_handlers(dispatcher, intake: IntakeStateMachine) -> IntakeHandler:
    handler = IntakeHandler(intake)
    handler.setup(dispatcher)
    return handler
