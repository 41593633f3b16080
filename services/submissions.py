"""Submission value types shared by the store, intake and dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple


class Category(str, Enum):
    """Submission kind. Values double as inline keyboard callback data."""
    PROBLEM_REPORT = "report_problem"
    SUGGESTION = "make_suggestion"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @classmethod
    def from_callback(cls, data: Optional[str]) -> Optional["Category"]:
        try:
            return cls(data)
        except ValueError:
            return None


_CATEGORY_LABELS = {
    Category.PROBLEM_REPORT: "Проблема",
    Category.SUGGESTION: "Предложение",
}


@dataclass
class Submission:
    """One in-progress submission.

    A submitter without a ``Submission`` in the store has nothing in
    progress, so ``category`` is always set.
    """
    category: Category
    created_at: datetime
    text: str = ""
    photos: List[str] = field(default_factory=list)

    @property
    def has_text(self) -> bool:
        return bool(self.text)

    @property
    def photo_count(self) -> int:
        return len(self.photos)

    def copy(self) -> "Submission":
        return Submission(
            category=self.category,
            created_at=self.created_at,
            text=self.text,
            photos=list(self.photos),
        )


@dataclass(frozen=True)
class Submitter:
    """Identity of the user who sends a submission."""
    user_id: int
    username: Optional[str] = None
    first_name: str = ""

    @property
    def display_name(self) -> str:
        if self.username:
            return f"@{self.username}"
        return self.first_name


@dataclass(frozen=True)
class FinishedSubmission:
    """A submission handed off for delivery to the destination channel."""
    category: Category
    submitter_id: int
    submitter_display_name: str
    text: str
    photos: Tuple[str, ...] = ()

    @classmethod
    def from_submission(cls, submission: Submission, submitter: Submitter) -> "FinishedSubmission":
        return cls(
            category=submission.category,
            submitter_id=submitter.user_id,
            submitter_display_name=submitter.display_name,
            text=submission.text,
            photos=tuple(submission.photos),
        )
