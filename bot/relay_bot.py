"""Telegram bot wrapper around aiogram with a throttled outbound queue."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage
from asyncio_throttle import Throttler

from core import get_logger
from core.constants import DispatchDefaults

logger = get_logger(__name__)

OutboundTask = Callable[[], Awaitable[None]]


class RelayBot:
    def __init__(
        self,
        token: str,
        rate_limit: int,
        worker_count: int,
        message_queue_size: int,
    ) -> None:
        self.bot = Bot(token=token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
        self.storage = MemoryStorage()
        self.dispatcher = Dispatcher(storage=self.storage)
        self.rate_limit = rate_limit
        self.worker_count = worker_count
        self.message_queue: asyncio.Queue[OutboundTask] = asyncio.Queue(maxsize=message_queue_size)
        self.throttler = Throttler(rate_limit=rate_limit, period=1.0)
        self.workers: List[asyncio.Task] = []

    async def start(self) -> None:
        self.workers = [asyncio.create_task(self._worker_loop()) for _ in range(self.worker_count)]
        me = await self.bot.get_me()
        logger.info(f"Authorized on account {me.username}")
        await self.dispatcher.start_polling(self.bot)

    async def stop(self, drain_timeout: float = DispatchDefaults.DRAIN_TIMEOUT_SECONDS) -> None:
        """Deliver what is already queued, then shut down.

        Sends still pending after ``drain_timeout`` seconds are dropped with a
        warning.
        """
        if self.workers:
            try:
                await asyncio.wait_for(self.message_queue.join(), timeout=drain_timeout)
            except asyncio.TimeoutError:
                logger.debug(f"Outbound queue not drained within {drain_timeout}s")
        if self.message_queue.qsize():
            logger.warning(f"Shutting down with {self.message_queue.qsize()} undelivered submission(s) in queue")

        for worker in self.workers:
            worker.cancel()
        await asyncio.gather(*self.workers, return_exceptions=True)
        self.workers = []
        await self.dispatcher.storage.close()
        await self.bot.session.close()

    async def enqueue(self, task: OutboundTask) -> None:
        """Queue an outbound send; the caller does not wait for delivery.

        When the queue is full this waits for a free slot instead of dropping
        the send, so a burst of submissions slows ``/done`` down rather than
        losing one.
        """
        await self.message_queue.put(task)

    async def _worker_loop(self) -> None:
        while True:
            task = await self.message_queue.get()
            try:
                async with self.throttler:
                    await task()
            except Exception as e:
                # Delivery is best effort: failed sends are logged, not retried
                logger.error(f"Outbound task failed: {e}", exc_info=True)
            finally:
                self.message_queue.task_done()
