"""Tests for the Telegram intake handlers using mocked messages."""

from unittest.mock import patch

import pytest

from bot.handlers.intake import (
    CHOOSE_ACTION,
    IntakeHandler,
    PHOTO_NEEDS_TEXT,
    SUBMISSION_SENT,
    submitter_from_user,
)
from bot.middleware import SubmissionLoggingMiddleware
from services.submissions import Category
from tests.conftest import MockCallbackQuery, MockMessage


@pytest.fixture
def handler(intake):
    return IntakeHandler(intake)


def last_answer(message):
    return message.answer.call_args.args[0]


@pytest.mark.asyncio
async def test_start_shows_category_keyboard(handler):
    message = MockMessage(text="/start")

    await handler.start(message)

    assert last_answer(message) == CHOOSE_ACTION
    keyboard = message.answer.call_args.kwargs["reply_markup"]
    callback_data = [row[0].callback_data for row in keyboard.inline_keyboard]
    assert callback_data == ["report_problem", "make_suggestion"]


@pytest.mark.asyncio
async def test_select_category_starts_submission(handler, store):
    callback = MockCallbackQuery(data="report_problem")

    await handler.select_category(callback)

    callback.answer.assert_awaited_once()
    assert (await store.get(callback.from_user.id)).category is Category.PROBLEM_REPORT
    assert last_answer(callback.message).startswith("Опишите проблему и приложите до 4 фотографий")


@pytest.mark.asyncio
async def test_select_suggestion_prompt(handler):
    callback = MockCallbackQuery(data="make_suggestion")

    await handler.select_category(callback)

    assert last_answer(callback.message).startswith("Опишите ваше предложение")


@pytest.mark.asyncio
async def test_text_replies_only_on_first_text(handler, store):
    await handler.select_category(MockCallbackQuery(data="make_suggestion"))

    first = MockMessage(text="more light")
    second = MockMessage(text="in the hall")
    await handler.handle_text(first)
    await handler.handle_text(second)

    assert last_answer(first).startswith("Текст принят")
    second.answer.assert_not_awaited()
    assert (await store.get(first.from_user.id)).text == "more light\nin the hall"


@pytest.mark.asyncio
async def test_text_without_submission_is_silent(handler, store):
    message = MockMessage(text="hello")

    await handler.handle_text(message)

    message.answer.assert_not_awaited()
    assert await store.get(message.from_user.id) is None


@pytest.mark.asyncio
async def test_photo_before_text_prompts_for_text(handler):
    await handler.select_category(MockCallbackQuery(data="report_problem"))
    message = MockMessage(photo_ids=["p1"])

    await handler.handle_photo(message)

    assert last_answer(message) == PHOTO_NEEDS_TEXT


@pytest.mark.asyncio
async def test_photo_uses_largest_size_and_counts(handler, store):
    await handler.select_category(MockCallbackQuery(data="report_problem"))
    await handler.handle_text(MockMessage(text="broken door"))

    replies = []
    for index in range(5):
        message = MockMessage(photo_ids=[f"small-{index}", f"large-{index}"])
        await handler.handle_photo(message)
        replies.append(last_answer(message))

    assert replies[0] == "Фото принято (1/4). Отправьте ещё фото или /done для завершения."
    assert replies[3].startswith("Фото принято (4/4)")
    assert replies[4] == "Вы уже прикрепили максимум фотографий (4). Отправьте /done для завершения."
    submission = await store.get(123456789)
    assert submission.photos == [f"large-{i}" for i in range(4)]


@pytest.mark.asyncio
async def test_done_hands_off_and_thanks(handler, store, handoff):
    await handler.select_category(MockCallbackQuery(data="report_problem"))
    await handler.handle_text(MockMessage(text="help"))
    message = MockMessage(text="/done")

    await handler.done(message)

    assert last_answer(message) == SUBMISSION_SENT
    assert len(handoff.submissions) == 1
    assert handoff.submissions[0].submitter_display_name == "@testuser"
    assert await store.get(message.from_user.id) is None


@pytest.mark.asyncio
async def test_done_without_submission_is_silent(handler, handoff):
    message = MockMessage(text="/done")

    await handler.done(message)

    message.answer.assert_not_awaited()
    assert handoff.submissions == []


@pytest.mark.asyncio
async def test_handler_error_apologizes_and_reraises(handler, intake):
    async def broken(*args, **kwargs):
        raise RuntimeError("boom")

    intake.text = broken
    message = MockMessage(text="hello")

    with pytest.raises(RuntimeError):
        await handler.handle_text(message)

    assert last_answer(message).startswith("❌ Не удалось сохранить текст")


@pytest.mark.asyncio
async def test_callback_error_apologizes_in_chat(handler, intake):
    async def broken(*args, **kwargs):
        raise RuntimeError("boom")

    intake.select = broken
    callback = MockCallbackQuery(data="make_suggestion")

    with pytest.raises(RuntimeError):
        await handler.select_category(callback)

    assert last_answer(callback.message).startswith("❌ Не удалось начать обращение")


@pytest.mark.asyncio
async def test_handler_error_reaches_submission_middleware(handler, intake, store, caplog):
    async def broken(*args, **kwargs):
        raise RuntimeError("boom")

    await intake.select(123456789, Category.PROBLEM_REPORT)
    intake.photo = broken
    middleware = SubmissionLoggingMiddleware(store)
    message = MockMessage(photo_ids=["p1"])

    async def run_handler(event, data):
        return await handler.handle_photo(event)

    with patch("bot.middleware.submission_logger.Message", MockMessage):
        with pytest.raises(RuntimeError):
            await middleware(run_handler, message, {})

    assert "Submission Error | User 123456789 | State: report_problem (no text, 0 photo(s))" in caplog.text


def test_submitter_without_username_uses_first_name():
    message = MockMessage(username=None, first_name="Иван")

    submitter = submitter_from_user(message.from_user)

    assert submitter.display_name == "Иван"
    assert submitter.user_id == message.from_user.id
