"""
app/flow/handlers/text.py

Handles: free text from users

- Phone-like text is saved as the user's contact number
- Anything else is acknowledged as a code
"""

from app.core.context import ServiceContext
from app.schemas.webhook import Message
from app.services.telegram_service import TelegramResult
from utils.constants import CODE_RECEIVED_MESSAGE, PARSE_MODE_HTML, PHONE_SAVED_MESSAGE
from utils.validation_utils import looks_like_phone


async def handle_text(ctx: ServiceContext, message: Message) -> TelegramResult:
    text = (message.text or "").strip()
    user_id = str(message.from_user.id if message.from_user else message.chat.id)

    if looks_like_phone(text):
        ctx.phones.set(user_id, text)
        reply = PHONE_SAVED_MESSAGE
    else:
        reply = CODE_RECEIVED_MESSAGE

    return await ctx.expiry.send_ephemeral(message.chat.id, reply, parse_mode=PARSE_MODE_HTML)
