"""Per-user intake state machine for problem reports and suggestions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from core import get_logger
from core.constants import SubmissionDefaults
from services.submission_store import SubmissionStore
from services.submissions import Category, FinishedSubmission, Submission, Submitter

logger = get_logger(__name__)

Handoff = Callable[[FinishedSubmission], Awaitable[None]]


class IntakeOutcome(Enum):
    """What an inbound event did to the submitter's submission."""
    STARTED = "started"
    TEXT_ACCEPTED = "text_accepted"
    TEXT_APPENDED = "text_appended"
    PHOTO_ACCEPTED = "photo_accepted"
    PHOTO_NEEDS_TEXT = "photo_needs_text"
    PHOTO_LIMIT_REACHED = "photo_limit_reached"
    COMPLETED = "completed"
    NO_ACTIVE_SUBMISSION = "no_active_submission"

    @property
    def rejected(self) -> bool:
        return self in (IntakeOutcome.PHOTO_NEEDS_TEXT, IntakeOutcome.PHOTO_LIMIT_REACHED)


@dataclass(frozen=True)
class IntakeResult:
    outcome: IntakeOutcome
    category: Optional[Category] = None
    photo_count: int = 0
    finished: Optional[FinishedSubmission] = None


_IGNORED = IntakeResult(IntakeOutcome.NO_ACTIVE_SUBMISSION)


class IntakeStateMachine:
    """Advances submissions in response to select/text/photo/complete events.

    Rejections are returned as outcomes for the caller to relay to the user;
    nothing here raises for bad user input. Events other than ``select`` for
    a user with nothing in progress are ignored.
    """

    def __init__(
        self,
        store: SubmissionStore,
        handoff: Handoff,
        max_photos: int = SubmissionDefaults.MAX_PHOTOS,
    ):
        self.store = store
        self.handoff = handoff
        self.max_photos = max_photos

    async def select(self, user_id: int, category: Category) -> IntakeResult:
        """Start a fresh submission, abandoning any previous one."""
        await self.store.set(user_id, Submission(category=category, created_at=self.store.clock()))
        return IntakeResult(IntakeOutcome.STARTED, category=category)

    async def text(self, user_id: int, content: str) -> IntakeResult:
        if not content:
            return _IGNORED

        def add_text(submission: Submission) -> IntakeResult:
            if submission.has_text:
                submission.text += "\n" + content
                outcome = IntakeOutcome.TEXT_APPENDED
            else:
                submission.text = content
                outcome = IntakeOutcome.TEXT_ACCEPTED
            return IntakeResult(outcome, submission.category, submission.photo_count)

        return await self.store.apply(user_id, add_text) or _IGNORED

    async def photo(self, user_id: int, reference: str) -> IntakeResult:
        def add_photo(submission: Submission) -> IntakeResult:
            if not submission.has_text:
                outcome = IntakeOutcome.PHOTO_NEEDS_TEXT
            elif submission.photo_count >= self.max_photos:
                outcome = IntakeOutcome.PHOTO_LIMIT_REACHED
            else:
                submission.photos.append(reference)
                outcome = IntakeOutcome.PHOTO_ACCEPTED
            return IntakeResult(outcome, submission.category, submission.photo_count)

        return await self.store.apply(user_id, add_photo) or _IGNORED

    async def complete(self, submitter: Submitter) -> IntakeResult:
        """Hand the submission off for delivery and forget it.

        The submission is removed before the handoff, so a delivery failure
        cannot be retried from here.
        """
        submission = await self.store.pop(submitter.user_id)
        if submission is None:
            return _IGNORED

        finished = FinishedSubmission.from_submission(submission, submitter)
        await self.handoff(finished)
        logger.info(
            f"Handed off {submission.category.value} from user {submitter.user_id} "
            f"({len(finished.photos)} photo(s))",
            extra={"user_id": submitter.user_id},
        )
        return IntakeResult(
            IntakeOutcome.COMPLETED,
            category=finished.category,
            photo_count=len(finished.photos),
            finished=finished,
        )
