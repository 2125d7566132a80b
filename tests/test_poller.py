import asyncio

import pytest

from app.services.telegram_poller import TelegramPoller
from conftest import text_update


@pytest.mark.asyncio
async def test_poll_once_dispatches_and_advances_offset(ctx, telegram):
    telegram.updates = [text_update("+639171234567", update_id=10), text_update("hi", update_id=11)]
    poller = TelegramPoller(ctx)

    handled = await poller.poll_once()

    assert handled == 2
    assert poller.offset == 12
    assert ctx.phones.get("42") == "+639171234567"
    assert [m["text"] for m in telegram.sent] == [
        "Phone saved! Kung may code ka mula sa website, i-send lang dito.",
        "Code received.",
    ]
    ctx.cancel_timers()


@pytest.mark.asyncio
async def test_failed_poll_reports_failure(ctx, telegram):
    telegram.failing.add("get_updates")
    poller = TelegramPoller(ctx)

    assert await poller.poll_once() == -1
    assert poller.offset is None


@pytest.mark.asyncio
async def test_start_and_stop(ctx, telegram):
    poller = TelegramPoller(ctx, retry_delay=0.01)
    telegram.updates = [text_update("hi", update_id=1)]

    poller.start()
    assert poller.running
    await asyncio.sleep(0.02)
    await poller.stop()

    assert not poller.running
    assert telegram.sent[0]["text"] == "Code received."
    ctx.cancel_timers()
