"""
app/flow/handlers/welcome.py

Handles: /start

- "/start verify_<code>" echoes the code from the website deep link
- Any other payload gets the generic welcome
- Both replies are ephemeral
"""

import html

from app.core.context import ServiceContext
from app.core.logging import get_logger
from app.schemas.webhook import Message
from app.services.telegram_service import TelegramResult
from utils.constants import PARSE_MODE_HTML, VERIFY_CODE_MESSAGE, WELCOME_MESSAGE
from utils.validation_utils import extract_verify_code, parse_start_payload

logger = get_logger(__name__)


async def handle_start(ctx: ServiceContext, message: Message) -> TelegramResult:
    payload = parse_start_payload(message.text or "")
    code = extract_verify_code(payload)

    if code is not None:
        logger.info("Start with verification payload", extra={"chat_id": str(message.chat.id)})
        text = VERIFY_CODE_MESSAGE.format(code=html.escape(code))
    else:
        text = WELCOME_MESSAGE

    return await ctx.expiry.send_ephemeral(message.chat.id, text, parse_mode=PARSE_MODE_HTML)
