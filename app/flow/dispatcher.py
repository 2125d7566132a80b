"""
app/flow/dispatcher.py

Purpose: Central update dispatcher

- Receives Telegram updates from the poller or the webhook
- Routes /start, free text and decision buttons to their handlers
- Handler failures are logged and never reach the caller
"""

from typing import Any, Dict, Union

from pydantic import ValidationError as PydanticValidationError

from app.core.context import ServiceContext
from app.core.logging import get_logger
from app.schemas.webhook import Update

logger = get_logger(__name__)


def route_name(update: Update) -> str:
    """Names the handler an update goes to ("ignored" if none)."""
    # Every button press gets answered, malformed ones included
    if update.callback_query is not None:
        return "decision"

    message = update.message
    if message is None or message.text is None:
        return "ignored"

    command = message.text.strip().split(maxsplit=1)
    if command and command[0].split("@", 1)[0] == "/start":
        return "start"

    return "text"


async def dispatch_update(ctx: ServiceContext, raw: Union[Update, Dict[str, Any]]) -> str:
    """
    Main dispatcher for incoming Telegram updates.

    Args:
        ctx: Service context
        raw: Update model or raw update JSON

    Returns:
        The route taken ("decision", "start", "text", "ignored", "invalid", "error")
    """
    from app.flow.handlers.decision import handle_decision
    from app.flow.handlers.text import handle_text
    from app.flow.handlers.welcome import handle_start

    try:
        update = raw if isinstance(raw, Update) else Update.model_validate(raw)
    except PydanticValidationError as e:
        logger.warning(f"Invalid update skipped: {e.error_count()} error(s)")
        return "invalid"

    route = route_name(update)
    logger.debug(f"Update {update.update_id} -> {route}")

    try:
        if route == "decision":
            await handle_decision(ctx, update.callback_query)
        elif route == "start":
            await handle_start(ctx, update.message)
        elif route == "text":
            await handle_text(ctx, update.message)
    except Exception as e:
        logger.error(f"Handler error on update {update.update_id}: {e}", exc_info=True)
        return "error"

    return route
