"""
app/services/telegram_poller.py

Purpose: Long-polling update loop

- Calls getUpdates with a moving offset
- Hands every update to the dispatcher, one at a time
- Backs off after a failed poll and keeps going
- Runs as a background task for the lifetime of the app
"""

import asyncio
from typing import Optional

from app.core.context import ServiceContext
from app.core.exceptions import TransportError
from app.core.logging import get_logger
from app.flow.dispatcher import dispatch_update

logger = get_logger(__name__)

RETRY_DELAY_SECONDS = 5.0


class TelegramPoller:
    """Background getUpdates loop."""

    def __init__(self, ctx: ServiceContext, retry_delay: float = RETRY_DELAY_SECONDS):
        self.ctx = ctx
        self.retry_delay = retry_delay
        self.offset: Optional[int] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> int:
        """
        Fetches and dispatches one batch of updates.

        Returns:
            Number of updates handled, or -1 if the poll failed
        """
        result = await self.ctx.telegram.get_updates(
            offset=self.offset,
            timeout=self.ctx.settings.TELEGRAM_POLL_TIMEOUT,
        )
        try:
            updates = result.raise_for_error().result or []
        except TransportError as e:
            logger.warning(f"getUpdates failed: {e.message} ({e.details})")
            return -1

        for raw in updates:
            update_id = raw.get("update_id")
            if isinstance(update_id, int):
                self.offset = update_id + 1
            await dispatch_update(self.ctx, raw)

        return len(updates)

    async def run(self) -> None:
        cleared = await self.ctx.telegram.delete_webhook()
        if not cleared.success:
            logger.warning(f"deleteWebhook failed: {cleared.error}")

        logger.info("📡 Telegram polling started")
        while True:
            try:
                handled = await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Polling error: {e}", exc_info=True)
                handled = -1

            if handled < 0:
                await asyncio.sleep(self.retry_delay)

    def start(self) -> asyncio.Task:
        if not self.running:
            self._task = asyncio.create_task(self.run(), name="telegram-poller")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Telegram polling stopped")
