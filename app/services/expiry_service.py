"""
app/services/expiry_service.py

Purpose: Ephemeral messages

- Sends a message and schedules its deletion after MESSAGE_TTL_SECONDS
- One deletion timer per chat_id:message_id; rescheduling replaces it
- Deletion failures (already gone, no rights) are logged and dropped
"""

from typing import Any, Optional

from app.core.logging import get_logger
from app.services.scheduler import DeadlineScheduler
from app.services.telegram_service import ChatId, TelegramResult, TelegramService

logger = get_logger(__name__)


def expiry_key(chat_id: ChatId, message_id: int) -> str:
    return f"{chat_id}:{message_id}"


class ExpiryService:
    """Auto-deletes messages after a delay."""

    def __init__(self, scheduler: DeadlineScheduler, telegram: TelegramService, ttl: float):
        self.scheduler = scheduler
        self.telegram = telegram
        self.ttl = ttl

    def schedule_expiry(self, chat_id: ChatId, message_id: int, delay: Optional[float] = None) -> str:
        """
        Schedules deletion of a sent message.

        Args:
            chat_id: Chat the message lives in
            message_id: Telegram message id
            delay: Seconds until deletion (defaults to the configured TTL)

        Returns:
            The timer key
        """
        key = expiry_key(chat_id, message_id)

        async def expire():
            result = await self.telegram.delete_message(chat_id, message_id)
            if result.success:
                logger.debug(f"Expired message {key}")
            else:
                logger.warning(f"Could not delete message {key}: {result.error}")

        self.scheduler.schedule(key, self.ttl if delay is None else delay, expire)
        return key

    async def send_ephemeral(self, chat_id: ChatId, text: str, **options: Any) -> TelegramResult:
        """
        Sends a message that deletes itself after the TTL.

        Options are passed to TelegramService.send_message (parse_mode, reply_markup).
        A failed send schedules nothing.
        """
        result = await self.telegram.send_message(chat_id, text, **options)

        if result.message_id is None:
            logger.warning(
                f"Ephemeral message not sent: {result.error}",
                extra={"chat_id": str(chat_id)}
            )
            return result

        self.schedule_expiry(chat_id, result.message_id)
        return result
