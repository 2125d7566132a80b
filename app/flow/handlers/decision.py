"""
app/flow/handlers/decision.py

Handles: reviewer approve / reject buttons

- Retires the submission named in the callback data
- Stops the submitter's typing loop
- Confirms the decision to the reviewer with an ephemeral message

The first click on a submission wins; later clicks report "not found".
"""

import html
from typing import Optional

from app.core.context import ServiceContext
from app.core.exceptions import SubmissionNotFoundError
from app.core.logging import get_logger, LogContext
from app.flow.states import Decision, parse_decision
from app.models.submission import Submission
from app.schemas.webhook import CallbackQuery
from utils.constants import (
    APPROVED_MESSAGE,
    CALLBACK_APPROVED,
    CALLBACK_NOT_FOUND,
    CALLBACK_REJECTED,
    CALLBACK_UNKNOWN,
    PARSE_MODE_HTML,
    REJECTED_MESSAGE,
    UNKNOWN_USER_ID,
)
from utils.validation_utils import parse_callback_data

logger = get_logger(__name__)


def format_decision_message(decision: Decision, submission: Submission) -> str:
    if decision is Decision.APPROVE:
        return APPROVED_MESSAGE.format(
            first_name=html.escape(submission.first_name),
            username=html.escape(submission.username),
            contact=html.escape(submission.contact_display),
            code=html.escape(submission.code),
        )
    return REJECTED_MESSAGE.format(user_id=html.escape(submission.user_id or UNKNOWN_USER_ID))


def apply_decision(ctx: ServiceContext, decision: Decision, submission_id: str) -> Submission:
    """
    Retires a pending submission and stops its typing loop. No I/O.

    Returns:
        The decided submission

    Raises:
        SubmissionNotFoundError: If it is unknown, expired or already decided
    """
    submission = ctx.submissions.consume(submission_id)
    if submission is None:
        raise SubmissionNotFoundError(details={"submission_id": submission_id})

    submission.transition_to(decision.resulting_status)

    if submission.user_id:
        ctx.presence.stop(submission.user_id)

    return submission


async def handle_decision(ctx: ServiceContext, query: CallbackQuery) -> Optional[Submission]:
    """
    Processes an approve/reject button press.

    Args:
        ctx: Service context
        query: Telegram callback query

    Returns:
        The decided submission, or None if nothing was decided
    """
    parsed = parse_callback_data(query.data or "")
    decision = parse_decision(parsed[0]) if parsed else None

    if decision is None:
        logger.warning(f"Unknown callback data: {query.data!r}")
        await ctx.telegram.answer_callback_query(query.id, CALLBACK_UNKNOWN)
        return None

    submission_id = parsed[1]

    with LogContext(submission_id=submission_id, state=decision.value):
        try:
            submission = apply_decision(ctx, decision, submission_id)
        except SubmissionNotFoundError:
            logger.info("Decision on unknown or expired submission")
            await ctx.telegram.answer_callback_query(query.id, CALLBACK_NOT_FOUND, show_alert=True)
            return None

        logger.info(f"Submission {submission.status.value.lower()}")

        answer = CALLBACK_APPROVED if decision is Decision.APPROVE else CALLBACK_REJECTED
        await ctx.telegram.answer_callback_query(query.id, answer)

        await ctx.expiry.send_ephemeral(
            query.chat_id,
            format_decision_message(decision, submission),
            parse_mode=PARSE_MODE_HTML,
        )

    return submission
