"""
app/services/presence_service.py

Purpose: "typing..." indicator while a reviewer decides

- One repeating chat action per user, keyed typing_<userId>
- start() replaces an existing loop, so repeated submissions never stack
- stop() is idempotent
- A failed tick is logged; the next tick still runs
"""

from app.core.logging import get_logger
from app.services.scheduler import IntervalScheduler
from app.services.telegram_service import TelegramService

logger = get_logger(__name__)

TYPING_ACTION = "typing"


def presence_key(user_id: str) -> str:
    return f"typing_{user_id}"


class PresenceService:
    """Starts and stops per-user typing loops."""

    def __init__(self, scheduler: IntervalScheduler, telegram: TelegramService, interval: float):
        self.scheduler = scheduler
        self.telegram = telegram
        self.interval = interval

    def start(self, user_id: str) -> None:
        user_id = str(user_id)

        async def tick():
            result = await self.telegram.send_chat_action(user_id, TYPING_ACTION)
            if not result.success:
                logger.warning(
                    f"Typing action failed: {result.error}",
                    extra={"user_id": user_id}
                )

        self.scheduler.schedule(presence_key(user_id), self.interval, tick)
        logger.info("Typing loop started", extra={"user_id": user_id})

    def stop(self, user_id: str) -> bool:
        stopped = self.scheduler.cancel(presence_key(str(user_id)))
        if stopped:
            logger.info("Typing loop stopped", extra={"user_id": str(user_id)})
        return stopped

    def is_active(self, user_id: str) -> bool:
        return presence_key(str(user_id)) in self.scheduler
