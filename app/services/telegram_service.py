"""
app/services/telegram_service.py

Purpose: Telegram Bot API client

- Sends, deletes and reacts to messages over HTTPS (httpx)
- Sends chat actions ("typing")
- Fetches updates for long polling
- Never raises for network/API errors: every call returns a TelegramResult
"""

import httpx
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from app.core.config import Settings
from app.core.exceptions import TransportError
from app.core.logging import get_logger

logger = get_logger(__name__)

ChatId = Union[int, str]


@dataclass
class TelegramResult:
    """
    Outcome of one Bot API call.

    success: True if Telegram answered ok=true
    result: the "result" field of the response
    error: description of the failure, if any
    error_code: Telegram or HTTP error code, if any
    """
    success: bool
    result: Any = None
    error: Optional[str] = None
    error_code: Optional[int] = None

    @property
    def message_id(self) -> Optional[int]:
        if self.success and isinstance(self.result, dict):
            return self.result.get("message_id")
        return None

    def raise_for_error(self) -> "TelegramResult":
        if not self.success:
            raise TransportError(self.error or "Telegram request failed", details={"error_code": self.error_code})
        return self


def mask_token(token: Optional[str]) -> str:
    """Mask bot token for logging. Shows first 4 and last 4 chars."""
    if not token or len(token) < 8:
        return "***"
    return f"{token[:4]}...{token[-4:]}"


class TelegramService:
    """Service for calling the Telegram Bot API"""

    def __init__(self, config: Settings, client: Optional[httpx.AsyncClient] = None):
        self.token = config.BOT_TOKEN
        self.base_url = f"{config.TELEGRAM_API_BASE.rstrip('/')}/bot{self.token}"
        self.timeout = config.TELEGRAM_TIMEOUT
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def is_configured(self) -> bool:
        """Check if a bot token is available"""
        return bool(self.token)

    async def call(self, method: str, payload: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> TelegramResult:
        """
        Calls a Bot API method with a JSON payload.

        Args:
            method: Bot API method name (e.g. "sendMessage")
            payload: JSON body
            timeout: Request timeout override (long polling)

        Returns:
            TelegramResult
        """
        if not self.is_configured():
            return TelegramResult(success=False, error="BOT_TOKEN is not set")

        url = f"{self.base_url}/{method}"
        try:
            response = await self.client.post(
                url,
                json=payload or {},
                timeout=timeout if timeout is not None else self.timeout
            )
        except httpx.TimeoutException:
            logger.warning(f"Telegram API timeout method={method} token={mask_token(self.token)}")
            return TelegramResult(success=False, error="Telegram API timeout")
        except httpx.HTTPError as e:
            logger.warning(f"Telegram network error method={method} token={mask_token(self.token)}: {e}")
            return TelegramResult(success=False, error=str(e))

        try:
            data = response.json()
        except ValueError:
            logger.warning(f"Telegram API HTTP {response.status_code} method={method}: non-JSON body")
            return TelegramResult(
                success=False,
                error=f"HTTP {response.status_code}: {response.text[:200]}",
                error_code=response.status_code
            )

        if data.get("ok"):
            return TelegramResult(success=True, result=data.get("result"))

        description = data.get("description", "Unknown Telegram API error")
        logger.debug(f"Telegram API error method={method}: {description}")
        return TelegramResult(
            success=False,
            error=description,
            error_code=data.get("error_code", response.status_code)
        )

    async def send_message(
        self,
        chat_id: ChatId,
        text: str,
        parse_mode: Optional[str] = None,
        reply_markup: Optional[Dict[str, Any]] = None,
    ) -> TelegramResult:
        """
        Sends a text message.

        Returns:
            TelegramResult whose message_id is the sent message's id
        """
        payload: Dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode
        if reply_markup:
            payload["reply_markup"] = reply_markup

        result = await self.call("sendMessage", payload)
        if result.success:
            logger.debug(f"Message sent: chat={chat_id} message_id={result.message_id}")
        return result

    async def delete_message(self, chat_id: ChatId, message_id: int) -> TelegramResult:
        return await self.call("deleteMessage", {"chat_id": chat_id, "message_id": message_id})

    async def send_chat_action(self, chat_id: ChatId, action: str = "typing") -> TelegramResult:
        return await self.call("sendChatAction", {"chat_id": chat_id, "action": action})

    async def answer_callback_query(
        self,
        callback_query_id: str,
        text: Optional[str] = None,
        show_alert: bool = False,
    ) -> TelegramResult:
        payload: Dict[str, Any] = {"callback_query_id": callback_query_id}
        if text:
            payload["text"] = text
        if show_alert:
            payload["show_alert"] = True
        return await self.call("answerCallbackQuery", payload)

    async def get_updates(
        self,
        offset: Optional[int] = None,
        timeout: int = 30,
        allowed_updates: Optional[List[str]] = None,
    ) -> TelegramResult:
        """Long-polls for updates. The HTTP timeout is padded past the poll timeout."""
        payload: Dict[str, Any] = {
            "timeout": timeout,
            "allowed_updates": allowed_updates or ["message", "callback_query"],
        }
        if offset is not None:
            payload["offset"] = offset
        return await self.call("getUpdates", payload, timeout=timeout + 5)

    async def delete_webhook(self) -> TelegramResult:
        """Required before getUpdates works on a bot that had a webhook."""
        return await self.call("deleteWebhook", {"drop_pending_updates": False})
