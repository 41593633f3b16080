"""In-memory submission store with a periodic expiry sweep."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, TypeVar

from core import get_logger
from services.submissions import Submission

logger = get_logger(__name__)

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionStore:
    """Maps a submitter id to at most one in-progress submission.

    Every read and mutation, including the expiry sweep, runs under a single
    ``asyncio.Lock``. Callers only ever see copies of stored submissions.
    Ages are measured with ``clock``, timezone-aware UTC by default.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._submissions: Dict[int, Submission] = {}
        self._lock = asyncio.Lock()
        self.clock = clock

    async def get(self, user_id: int) -> Optional[Submission]:
        async with self._lock:
            submission = self._submissions.get(user_id)
            return submission.copy() if submission else None

    async def set(self, user_id: int, submission: Submission) -> None:
        """Store a submission, replacing whatever the user had in progress."""
        async with self._lock:
            self._submissions[user_id] = submission.copy()

    async def delete(self, user_id: int) -> None:
        async with self._lock:
            self._submissions.pop(user_id, None)

    async def pop(self, user_id: int) -> Optional[Submission]:
        """Remove and return the user's submission in one step."""
        async with self._lock:
            return self._submissions.pop(user_id, None)

    async def apply(self, user_id: int, mutate: Callable[[Submission], T]) -> Optional[T]:
        """Run ``mutate`` on the stored submission while holding the lock.

        Returns ``None`` without calling ``mutate`` when the user has no
        submission in progress.
        """
        async with self._lock:
            submission = self._submissions.get(user_id)
            if submission is None:
                return None
            return mutate(submission)

    async def sweep_expired(self, now: datetime, max_age: timedelta) -> List[int]:
        """Drop every submission created more than ``max_age`` before ``now``.

        Returns:
            Ids of the submitters whose submissions were removed
        """
        async with self._lock:
            expired = [
                user_id
                for user_id, submission in self._submissions.items()
                if now - submission.created_at > max_age
            ]
            for user_id in expired:
                del self._submissions[user_id]
        return expired

    async def count(self) -> int:
        async with self._lock:
            return len(self._submissions)


class SubmissionSweeper:
    """Background task that periodically expires abandoned submissions."""

    def __init__(
        self,
        store: SubmissionStore,
        interval_minutes: int = 60,
        max_age_minutes: int = 60,
    ):
        self.store = store
        self.interval = interval_minutes * 60  # seconds
        self.max_age = timedelta(minutes=max_age_minutes)
        self.running = False
        self.sweep_task: Optional[asyncio.Task] = None

    async def sweep_once(self) -> List[int]:
        expired = await self.store.sweep_expired(self.store.clock(), self.max_age)
        if expired:
            logger.info(f"Expired {len(expired)} abandoned submission(s)")
        else:
            logger.debug("No expired submissions")
        return expired

    async def sweep_loop(self) -> None:
        """Main sweep loop running in background."""
        logger.info(f"Sweep loop started (interval: {self.interval / 60:.0f} min, max age: {self.max_age})")

        while self.running:
            try:
                await asyncio.sleep(self.interval)
                if self.running:
                    await self.sweep_once()
            except asyncio.CancelledError:
                logger.info("Sweep loop cancelled")
                raise
            except Exception as e:
                logger.error(f"Error in sweep loop: {e}", exc_info=True)

    async def start(self) -> None:
        """Start the sweeper."""
        if self.running:
            logger.warning("Submission sweeper is already running")
            return

        self.running = True
        self.sweep_task = asyncio.create_task(self.sweep_loop())
        logger.info("Submission sweeper started")

    async def stop(self) -> None:
        """Stop the sweeper and wait for its task to finish."""
        if not self.running:
            return

        self.running = False

        if self.sweep_task:
            self.sweep_task.cancel()
            try:
                await self.sweep_task
            except asyncio.CancelledError:
                pass
            self.sweep_task = None

        logger.info("Submission sweeper stopped")
