"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from services.intake import IntakeStateMachine
from services.submission_store import SubmissionStore
from services.submissions import FinishedSubmission


class FakeClock:
    """Manually advanced replacement for ``datetime.now``."""

    def __init__(self, start: datetime = datetime(2024, 9, 2, 9, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingHandoff:
    """Collects finished submissions instead of delivering them."""

    def __init__(self):
        self.submissions: List[FinishedSubmission] = []

    async def __call__(self, submission: FinishedSubmission) -> None:
        self.submissions.append(submission)


class MockMessage:
    """Mock объект для имитации сообщений Telegram."""

    def __init__(
        self,
        text: Optional[str] = None,
        photo_ids: Optional[List[str]] = None,
        user_id: int = 123456789,
        username: Optional[str] = "testuser",
        first_name: str = "Test",
    ):
        self.message_id = 12345
        self.date = datetime.now()
        self.content_type = "photo" if photo_ids else "text"
        self.text = text
        self.from_user = MagicMock()
        self.from_user.id = user_id
        self.from_user.username = username
        self.from_user.first_name = first_name
        self.chat = MagicMock()
        self.chat.id = user_id
        self.chat.type = "private"

        self.photo = None
        if photo_ids:
            # Telegram lists sizes from smallest to largest
            self.photo = [MagicMock(file_id=f"{file_id}_small") for file_id in photo_ids[:-1]]
            self.photo.append(MagicMock(file_id=photo_ids[-1]))

        self.answer = AsyncMock()


class MockCallbackQuery:
    """Mock объект для имитации callback query."""

    def __init__(self, data: str, user_id: int = 123456789):
        self.id = "callback_123"
        self.data = data
        self.from_user = MagicMock()
        self.from_user.id = user_id
        self.message = MockMessage(user_id=user_id)
        self.answer = AsyncMock()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SubmissionStore(clock=clock)


@pytest.fixture
def handoff():
    return RecordingHandoff()


@pytest.fixture
def intake(store, handoff):
    return IntakeStateMachine(store, handoff)
