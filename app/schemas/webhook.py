"""
app/schemas/webhook.py

Purpose: Telegram update schemas

- Validates updates received by long polling or the webhook
- Keeps only the fields the bot handlers read
- Unknown fields are ignored
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class TelegramModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class User(TelegramModel):
    id: int
    is_bot: bool = False
    first_name: str = ""
    username: Optional[str] = None


class Chat(TelegramModel):
    id: int
    type: str = "private"


class Message(TelegramModel):
    message_id: int
    chat: Chat
    from_user: Optional[User] = Field(default=None, alias="from")
    text: Optional[str] = None


class CallbackQuery(TelegramModel):
    id: str
    from_user: User = Field(..., alias="from")
    message: Optional[Message] = None
    data: Optional[str] = None

    @property
    def chat_id(self) -> int:
        """Chat to answer in: where the button was pressed, else the presser."""
        if self.message is not None:
            return self.message.chat.id
        return self.from_user.id


class Update(TelegramModel):
    """
    Telegram Update object.

    Example:
        {
            "update_id": 1001,
            "message": {
                "message_id": 5,
                "chat": {"id": 42, "type": "private"},
                "from": {"id": 42, "first_name": "Ana", "username": "ana"},
                "text": "+639171234567"
            }
        }
    """
    update_id: int
    message: Optional[Message] = None
    callback_query: Optional[CallbackQuery] = None
