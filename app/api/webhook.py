"""
app/api/webhook.py

Purpose: Telegram webhook endpoint

- Used when TELEGRAM_MODE=webhook instead of long polling
- Checks the secret token header when one is configured
- Passes the update to the flow dispatcher
"""

import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from app.core.context import ServiceContext, get_context
from app.core.logging import get_logger
from app.flow.dispatcher import dispatch_update

logger = get_logger(__name__)
router = APIRouter()


@router.post("/telegram/webhook")
async def telegram_webhook(
    request: Request,
    ctx: ServiceContext = Depends(get_context),
    x_telegram_bot_api_secret_token: Optional[str] = Header(default=None),
):
    """
    Receives a Telegram Update.

    Always answers 200 for processed or unparseable updates so Telegram
    does not redeliver them.
    """
    expected = ctx.settings.TELEGRAM_WEBHOOK_SECRET
    if expected and not secrets.compare_digest(x_telegram_bot_api_secret_token or "", expected):
        logger.warning("Webhook call with wrong secret token")
        raise HTTPException(status_code=403, detail="Invalid secret token")

    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Webhook body is not JSON")
        return {"ok": False, "route": "invalid"}

    if not isinstance(payload, dict):
        return {"ok": False, "route": "invalid"}

    route = await dispatch_update(ctx, payload)
    return {"ok": route not in ("invalid", "error"), "route": route}
