"""
app/services/scheduler.py

Purpose: Keyed, cancellable timers on the asyncio event loop

- DeadlineScheduler: one-shot actions (message auto-expiry)
- IntervalScheduler: repeating actions (typing presence loops)
- At most one live action per key; scheduling under a taken key
  cancels the previous action first
- Action failures are logged and never reach the scheduler or other timers
"""

import asyncio
from typing import Awaitable, Callable, Dict, List

from app.core.logging import get_logger

logger = get_logger(__name__)

Action = Callable[[], Awaitable[None]]


class KeyedScheduler:
    """
    Cancellation-by-key shared by both scheduler kinds.

    install/cancel never await, so every mutation of the key table is
    atomic with respect to other handlers on the event loop.
    """

    def __init__(self, name: str):
        self.name = name
        self._tasks: Dict[str, asyncio.Task] = {}

    def cancel(self, key: str) -> bool:
        """
        Cancels the action registered under key.

        Returns:
            True if an action was cancelled, False if none was registered
        """
        task = self._tasks.pop(key, None)
        if task is None:
            return False
        task.cancel()
        logger.debug(f"{self.name}: cancelled {key}")
        return True

    def cancel_all(self) -> int:
        """Cancels every registered action. Used on shutdown."""
        keys = list(self._tasks)
        for key in keys:
            self.cancel(key)
        return len(keys)

    async def shutdown(self) -> int:
        """Cancels every registered action and waits for the tasks to finish."""
        tasks = list(self._tasks.values())
        cancelled = self.cancel_all()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        return cancelled

    def is_scheduled(self, key: str) -> bool:
        return key in self._tasks

    def keys(self) -> List[str]:
        return list(self._tasks)

    def __contains__(self, key: str) -> bool:
        return self.is_scheduled(key)

    def __len__(self) -> int:
        return len(self._tasks)

    def _install(self, key: str, runner: Callable[[], Awaitable[None]]) -> asyncio.Task:
        # Replace first: the old task is cancelled before the new one exists
        self.cancel(key)
        task = asyncio.create_task(runner(), name=f"{self.name}:{key}")
        self._tasks[key] = task
        return task

    def _release(self, key: str) -> None:
        # Only drop the entry if it still belongs to the running task
        current = asyncio.current_task()
        if self._tasks.get(key) is current:
            del self._tasks[key]

    async def _fire(self, key: str, action: Action) -> None:
        try:
            await action()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"{self.name}: action for {key} failed: {e}", exc_info=True)


class DeadlineScheduler(KeyedScheduler):
    """Runs an action once, after a delay."""

    def __init__(self, name: str = "deadline"):
        super().__init__(name)

    def schedule(self, key: str, delay: float, action: Action) -> asyncio.Task:
        """
        Schedules action to run once after delay seconds.
        Replaces any action already registered under key.
        """
        async def runner():
            try:
                await asyncio.sleep(delay)
                await self._fire(key, action)
            finally:
                self._release(key)

        logger.debug(f"{self.name}: {key} due in {delay}s")
        return self._install(key, runner)


class IntervalScheduler(KeyedScheduler):
    """Runs an action every interval until cancelled."""

    def __init__(self, name: str = "interval"):
        super().__init__(name)

    def schedule(self, key: str, interval: float, action: Action) -> asyncio.Task:
        """
        Schedules action to run every interval seconds, first run after
        one interval. Replaces any action already registered under key.
        """
        async def runner():
            try:
                while True:
                    await asyncio.sleep(interval)
                    await self._fire(key, action)
            finally:
                self._release(key)

        logger.debug(f"{self.name}: {key} every {interval}s")
        return self._install(key, runner)
