import asyncio

import pytest

from app.services.scheduler import DeadlineScheduler, IntervalScheduler


@pytest.mark.asyncio
async def test_deadline_fires_once_and_releases_key():
    scheduler = DeadlineScheduler()
    fired = []

    async def action():
        fired.append("x")

    scheduler.schedule("chat:1", 0.01, action)
    assert "chat:1" in scheduler

    await asyncio.sleep(0.05)

    assert fired == ["x"]
    assert "chat:1" not in scheduler
    assert len(scheduler) == 0


@pytest.mark.asyncio
async def test_rescheduling_same_key_cancels_previous_action():
    scheduler = DeadlineScheduler()
    fired = []

    async def first():
        fired.append("first")

    async def second():
        fired.append("second")

    scheduler.schedule("chat:1", 0.02, first)
    scheduler.schedule("chat:1", 0.02, second)
    assert len(scheduler) == 1

    await asyncio.sleep(0.06)

    assert fired == ["second"]


@pytest.mark.asyncio
async def test_replaced_action_does_not_release_new_entry():
    scheduler = DeadlineScheduler()

    async def noop():
        pass

    scheduler.schedule("k", 0.01, noop)
    await asyncio.sleep(0)
    scheduler.schedule("k", 1.0, noop)
    await asyncio.sleep(0.03)

    assert scheduler.is_scheduled("k")
    scheduler.cancel_all()


@pytest.mark.asyncio
async def test_cancel_missing_key_is_noop():
    scheduler = IntervalScheduler()
    assert scheduler.cancel("typing_nobody") is False


@pytest.mark.asyncio
async def test_interval_repeats_until_cancelled():
    scheduler = IntervalScheduler()
    ticks = []

    async def tick():
        ticks.append(1)

    scheduler.schedule("typing_42", 0.01, tick)
    await asyncio.sleep(0.055)
    assert scheduler.cancel("typing_42") is True

    count = len(ticks)
    assert count >= 2

    await asyncio.sleep(0.03)
    assert len(ticks) == count


@pytest.mark.asyncio
async def test_interval_keeps_ticking_after_failures():
    scheduler = IntervalScheduler()
    calls = []

    async def flaky():
        calls.append(1)
        raise RuntimeError("telegram down")

    scheduler.schedule("typing_42", 0.01, flaky)
    await asyncio.sleep(0.055)

    assert len(calls) >= 2
    assert scheduler.is_scheduled("typing_42")
    scheduler.cancel_all()


@pytest.mark.asyncio
async def test_failing_action_does_not_affect_other_keys():
    scheduler = DeadlineScheduler()
    fired = []

    async def boom():
        raise RuntimeError("boom")

    async def ok():
        fired.append("ok")

    scheduler.schedule("a", 0.01, boom)
    scheduler.schedule("b", 0.02, ok)
    await asyncio.sleep(0.05)

    assert fired == ["ok"]
    assert len(scheduler) == 0


@pytest.mark.asyncio
async def test_cancel_all_stops_everything():
    deadlines = DeadlineScheduler()
    fired = []

    async def action():
        fired.append(1)

    for i in range(3):
        deadlines.schedule(f"chat:{i}", 0.01, action)

    assert deadlines.cancel_all() == 3
    await asyncio.sleep(0.03)

    assert fired == []
    assert deadlines.keys() == []


@pytest.mark.asyncio
async def test_shutdown_waits_for_cancelled_tasks():
    deadlines = DeadlineScheduler()
    intervals = IntervalScheduler()

    async def action():
        pass

    tasks = [deadlines.schedule("chat:1", 10, action), intervals.schedule("typing_42", 10, action)]

    assert await deadlines.shutdown() == 1
    assert await intervals.shutdown() == 1
    assert all(task.done() for task in tasks)
    assert len(deadlines) == 0
    assert len(intervals) == 0
    assert await deadlines.shutdown() == 0
