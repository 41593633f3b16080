"""Services package."""

from .submissions import Category, Submission, Submitter, FinishedSubmission
from .submission_store import SubmissionStore, SubmissionSweeper
from .intake import IntakeStateMachine, IntakeOutcome, IntakeResult
from .dispatcher import SubmissionDispatcher

__all__ = [
    "Category",
    "Submission",
    "Submitter",
    "FinishedSubmission",
    "SubmissionStore",
    "SubmissionSweeper",
    "IntakeStateMachine",
    "IntakeOutcome",
    "IntakeResult",
    "SubmissionDispatcher",
]
