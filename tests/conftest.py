"""
Shared fixtures: a recording fake of the Telegram client and fast timers.
"""

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.context import build_context
from app.main import create_app
from app.services.telegram_service import TelegramResult

ADMIN_CHAT_ID = "999"


class FakeTelegramService:
    """Records every Bot API call; methods listed in `failing` return errors."""

    def __init__(self):
        self.sent = []
        self.deleted = []
        self.actions = []
        self.answers = []
        self.failing = set()
        self.updates = []
        self.closed = False
        self._next_message_id = 100

    def _failed(self, method):
        return TelegramResult(success=False, error=f"{method} failed", error_code=400)

    async def send_message(self, chat_id, text, parse_mode=None, reply_markup=None):
        if "send_message" in self.failing:
            return self._failed("send_message")
        self._next_message_id += 1
        self.sent.append({
            "chat_id": chat_id,
            "text": text,
            "parse_mode": parse_mode,
            "reply_markup": reply_markup,
            "message_id": self._next_message_id,
        })
        return TelegramResult(success=True, result={"message_id": self._next_message_id})

    async def delete_message(self, chat_id, message_id):
        self.deleted.append((chat_id, message_id))
        if "delete_message" in self.failing:
            return self._failed("delete_message")
        return TelegramResult(success=True, result=True)

    async def send_chat_action(self, chat_id, action="typing"):
        self.actions.append((chat_id, action))
        if "send_chat_action" in self.failing:
            return self._failed("send_chat_action")
        return TelegramResult(success=True, result=True)

    async def answer_callback_query(self, callback_query_id, text=None, show_alert=False):
        self.answers.append({"id": callback_query_id, "text": text, "show_alert": show_alert})
        return TelegramResult(success=True, result=True)

    async def get_updates(self, offset=None, timeout=30, allowed_updates=None):
        if "get_updates" in self.failing:
            return self._failed("get_updates")
        batch, self.updates = self.updates, []
        return TelegramResult(success=True, result=batch)

    async def delete_webhook(self):
        return TelegramResult(success=True, result=True)

    async def close(self):
        self.closed = True

    def messages_to(self, chat_id):
        return [m for m in self.sent if str(m["chat_id"]) == str(chat_id)]


def make_settings(**overrides) -> Settings:
    values = dict(
        BOT_TOKEN="123456:test-token",
        ADMIN_CHAT_ID=ADMIN_CHAT_ID,
        TELEGRAM_MODE="webhook",
        TYPING_INTERVAL_SECONDS=0.02,
        MESSAGE_TTL_SECONDS=60,
        WEBAPP_URL="https://t.me/relay_bot/app",
        WEBSITE_URL=None,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def telegram():
    return FakeTelegramService()


@pytest.fixture
def ctx(settings, telegram):
    return build_context(settings, telegram)


@pytest.fixture
def app(settings, telegram):
    return create_app(settings, telegram)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def text_update(text, user_id=42, update_id=1, message_id=7):
    return {
        "update_id": update_id,
        "message": {
            "message_id": message_id,
            "chat": {"id": user_id, "type": "private"},
            "from": {"id": user_id, "is_bot": False, "first_name": "Ana", "username": "ana"},
            "text": text,
        },
    }


def callback_update(data, update_id=2, query_id="cb-1", chat_id=ADMIN_CHAT_ID):
    return {
        "update_id": update_id,
        "callback_query": {
            "id": query_id,
            "from": {"id": int(chat_id), "is_bot": False, "first_name": "Reviewer"},
            "message": {
                "message_id": 55,
                "chat": {"id": int(chat_id), "type": "private"},
                "text": "🔔 New verification request",
            },
            "data": data,
        },
    }
