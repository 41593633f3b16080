"""Bot middleware package."""

from .submission_logger import (
    setup_submission_middleware,
    SubmissionLoggingMiddleware,
    describe_submission,
)

__all__ = [
    "setup_submission_middleware",
    "SubmissionLoggingMiddleware",
    "describe_submission",
]
