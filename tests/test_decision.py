import pytest

from app.core.exceptions import SubmissionNotFoundError
from app.flow.handlers.decision import apply_decision, handle_decision
from app.flow.states import Decision, SubmissionStatus
from app.schemas.submission import LogCodeRequest
from app.schemas.webhook import CallbackQuery
from app.services.submission_service import register_submission
from conftest import ADMIN_CHAT_ID, callback_update


def query(data, query_id="cb-1"):
    return CallbackQuery.model_validate(callback_update(data, query_id=query_id)["callback_query"])


def pending(ctx, user_id=42):
    ctx.phones.set(str(user_id), "+639171234567")
    return register_submission(ctx, LogCodeRequest.model_validate({
        "code": "445566",
        "tgUser": {"id": user_id, "username": "ana", "first_name": "Ana"},
    }))


@pytest.mark.asyncio
async def test_approve_stops_loop_and_confirms_once(ctx, telegram):
    submission = pending(ctx)
    assert ctx.presence.is_active("42")

    decided = await handle_decision(ctx, query(f"approve:{submission.submission_id}"))

    assert decided.status == SubmissionStatus.APPROVED
    assert not ctx.presence.is_active("42")
    assert telegram.answers == [{"id": "cb-1", "text": "Approved", "show_alert": False}]

    confirmations = telegram.messages_to(ADMIN_CHAT_ID)
    assert len(confirmations) == 1
    assert confirmations[0]["text"] == (
        "Approved submission:\nUser: Ana (@ana)\nPhone: +639171234567\nCode: 445566"
    )
    assert confirmations[0]["parse_mode"] == "HTML"
    # the confirmation is ephemeral
    assert f"{ADMIN_CHAT_ID}:{confirmations[0]['message_id']}" in ctx.deadlines
    ctx.cancel_timers()


@pytest.mark.asyncio
async def test_reject_message(ctx, telegram):
    submission = pending(ctx)

    decided = await handle_decision(ctx, query(f"reject:{submission.submission_id}"))

    assert decided.status == SubmissionStatus.REJECTED
    assert telegram.answers[0]["text"] == "Rejected"
    assert telegram.sent[-1]["text"] == "❌ Rejected submission of user ID: 42"
    ctx.cancel_timers()


@pytest.mark.asyncio
async def test_second_decision_reports_not_found(ctx, telegram):
    submission = pending(ctx)

    await handle_decision(ctx, query(f"approve:{submission.submission_id}", "cb-1"))
    again = await handle_decision(ctx, query(f"reject:{submission.submission_id}", "cb-2"))

    assert again is None
    assert telegram.answers[-1] == {"id": "cb-2", "text": "Not found or expired", "show_alert": True}
    assert len(telegram.messages_to(ADMIN_CHAT_ID)) == 1
    ctx.cancel_timers()


@pytest.mark.asyncio
async def test_unknown_submission_changes_nothing(ctx, telegram):
    submission = pending(ctx)

    result = await handle_decision(ctx, query("approve:42_0"))

    assert result is None
    assert submission.submission_id in ctx.submissions
    assert ctx.presence.is_active("42")
    assert telegram.sent == []
    ctx.cancel_timers()


@pytest.mark.asyncio
async def test_malformed_callback_is_answered(ctx, telegram):
    result = await handle_decision(ctx, query("mute:1"))

    assert result is None
    assert telegram.answers == [{"id": "cb-1", "text": "Unknown action", "show_alert": False}]


@pytest.mark.asyncio
async def test_user_fields_are_html_escaped(ctx, telegram):
    submission = register_submission(ctx, LogCodeRequest.model_validate({
        "code": "<b>1</b>",
        "tgUser": {"id": 7, "username": "a&b", "first_name": "<Ana>"},
    }))

    await handle_decision(ctx, query(f"approve:{submission.submission_id}"))

    assert telegram.sent[-1]["text"] == (
        "Approved submission:\nUser: &lt;Ana&gt; (@a&amp;b)\nPhone: Unknown phone\nCode: &lt;b&gt;1&lt;/b&gt;"
    )
    ctx.cancel_timers()


@pytest.mark.asyncio
async def test_apply_decision_raises_for_retired_submission(ctx):
    submission = pending(ctx)

    decided = apply_decision(ctx, Decision.APPROVE, submission.submission_id)
    assert decided.status == SubmissionStatus.APPROVED

    with pytest.raises(SubmissionNotFoundError) as exc_info:
        apply_decision(ctx, Decision.REJECT, submission.submission_id)

    assert exc_info.value.code == "NOT_FOUND"
    assert exc_info.value.details == {"submission_id": submission.submission_id}
    ctx.cancel_timers()
