"""Tests for the submission transition logging middleware."""

import logging
from datetime import datetime

import pytest
from aiogram.types import Chat, Message, User

from bot.middleware import SubmissionLoggingMiddleware, describe_submission
from services.submissions import Category, Submission


def make_message(text="hello", user_id=7):
    return Message(
        message_id=1,
        date=datetime.now(),
        chat=Chat(id=user_id, type="private"),
        from_user=User(id=user_id, is_bot=False, first_name="Anna"),
        text=text,
    )


def test_describe_submission():
    assert describe_submission(None) == "none"
    submission = Submission(
        category=Category.PROBLEM_REPORT,
        created_at=datetime.now(),
        text="leak",
        photos=["p1"],
    )
    assert describe_submission(submission) == "report_problem (text, 1 photo(s))"


@pytest.mark.asyncio
async def test_logs_transition(store, intake, caplog):
    middleware = SubmissionLoggingMiddleware(store)

    async def handler(event, data):
        await intake.select(7, Category.SUGGESTION)
        return "handled"

    with caplog.at_level(logging.INFO):
        result = await middleware(handler, make_message(), {})

    assert result == "handled"
    assert "User 7 | none → make_suggestion (no text, 0 photo(s))" in caplog.text


@pytest.mark.asyncio
async def test_no_log_without_change(store, caplog):
    middleware = SubmissionLoggingMiddleware(store)

    async def handler(event, data):
        return None

    with caplog.at_level(logging.INFO):
        await middleware(handler, make_message(), {})

    assert "Submission Transition" not in caplog.text


@pytest.mark.asyncio
async def test_errors_are_logged_and_reraised(store, caplog):
    middleware = SubmissionLoggingMiddleware(store)

    async def handler(event, data):
        raise ValueError("bad update")

    with pytest.raises(ValueError):
        await middleware(handler, make_message(), {})

    assert "Submission Error | User 7" in caplog.text
