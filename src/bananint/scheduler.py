"""
Session-scoped task scheduling.

Every timer a session runs (passive ticker, periodic sync) and every
one-shot job it spawns (click-triggered sync) is owned by one
SessionScheduler and torn down with it.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional, Set, Union

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Action = Callable[[], Union[None, Awaitable[object]]]

TICK_INTERVAL_SECONDS = 1.0


def now_ms() -> float:
    return time.time() * 1000


class SessionScheduler:
    def __init__(self):
        self._periodic: List[asyncio.Task] = []
        self._oneshots: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def every(self, period: float, action: Action, name: Optional[str] = None) -> asyncio.Task:
        """Run action every `period` seconds until the scheduler closes"""
        self._ensure_open()
        task = asyncio.get_running_loop().create_task(
            self._repeat(period, action, name or getattr(action, "__name__", "job")),
            name=name,
        )
        self._periodic.append(task)
        return task

    def spawn(self, coro: Awaitable[object], name: Optional[str] = None) -> asyncio.Task:
        """Run a one-shot coroutine owned by this session"""
        self._ensure_open()
        task = asyncio.ensure_future(coro)
        if name:
            task.set_name(name)
        self._oneshots.add(task)
        task.add_done_callback(self._oneshots.discard)
        return task

    async def drain(self) -> None:
        """Wait for the outstanding one-shot jobs"""
        while self._oneshots:
            await asyncio.gather(*list(self._oneshots), return_exceptions=True)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        tasks = self._periodic + list(self._oneshots)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._periodic.clear()
        self._oneshots.clear()

    async def __aenter__(self) -> "SessionScheduler":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Scheduler is closed")

    @staticmethod
    async def _repeat(period: float, action: Action, label: str) -> None:
        while True:
            await asyncio.sleep(period)
            try:
                result = action()
                if asyncio.iscoroutine(result) or isinstance(result, asyncio.Future):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception(f"❌ Scheduled job {label} failed")


class PassiveTicker:
    """Adds bananasPerSecond × period every period. No drift correction."""

    def __init__(self, engine, period: float = TICK_INTERVAL_SECONDS):
        self.engine = engine
        self.period = period

    def tick(self) -> None:
        if self.engine.state.bananasPerSecond > 0:
            self.engine.apply_tick(self.period)

    def start(self, scheduler: SessionScheduler) -> asyncio.Task:
        return scheduler.every(self.period, self.tick, name="passive-ticker")
