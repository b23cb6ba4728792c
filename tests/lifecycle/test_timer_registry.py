"""
Tests for TimerRegistry: scheduling, failure capture and bulk cancellation.
"""

import asyncio

import pytest

from protoplay.lifecycle.timer_registry import TimerCategory, TimerRegistry


@pytest.mark.asyncio
async def test_call_later_fires():
    timers = TimerRegistry()
    fired = []

    timer_id = timers.call_later(0.01, lambda: fired.append(True), description="a -> b", node_id="1:1")
    record = timers.list_all()[0]

    assert record.info.id == timer_id
    assert record.info.node_id == "1:1"
    assert timers.pending_timers() == [record]

    await asyncio.sleep(0.05)

    assert fired == [True]
    assert record.fired and record.done
    assert timers.pending_timers() == []


@pytest.mark.asyncio
async def test_negative_delay_is_clamped():
    timers = TimerRegistry()
    timers.call_later(-1, lambda: None)
    assert timers.list_all()[0].info.delay == 0.0


@pytest.mark.asyncio
async def test_callback_failure_is_recorded():
    timers = TimerRegistry()

    def broken():
        raise ValueError("bad destination")

    timers.call_later(0, broken)
    await asyncio.sleep(0.01)

    (record,) = timers.failed()
    assert isinstance(record.finished_with_error, ValueError)


@pytest.mark.asyncio
async def test_task_failure_is_recorded_not_raised():
    timers = TimerRegistry()

    async def broken():
        raise RuntimeError("animation failed")

    task = timers.create_task(broken(), category=TimerCategory.CLICK, description="click 1:1 -> 1:2")
    await asyncio.gather(task, return_exceptions=True)
    await asyncio.sleep(0)

    (record,) = timers.failed()
    assert record.info.category == TimerCategory.CLICK
    assert timers.active_tasks() == []


@pytest.mark.asyncio
async def test_cancel_timers_spares_click_tasks():
    timers = TimerRegistry()
    gate = asyncio.Event()

    timers.call_later(10, lambda: None)
    animation = timers.create_task(gate.wait(), category=TimerCategory.ANIMATION, description="timeout")
    click = timers.create_task(gate.wait(), category=TimerCategory.CLICK, description="click")

    assert timers.cancel_timers() == 2
    await asyncio.sleep(0.01)

    assert animation.cancelled()
    assert not click.done()
    assert len(timers.cancelled()) == 2

    assert timers.cancel_all() == 1
    await asyncio.sleep(0.01)
    assert click.cancelled()


@pytest.mark.asyncio
async def test_cancel_all_skips_current_task():
    timers = TimerRegistry()
    results = []

    async def teardown():
        results.append(timers.cancel_all())

    task = timers.create_task(teardown(), category=TimerCategory.CLICK, description="self")
    await task

    assert results == [0]
    assert not task.cancelled()


@pytest.mark.asyncio
async def test_prune_keeps_history_bounded():
    timers = TimerRegistry(history_limit=3)
    for _ in range(5):
        timers.call_later(0, lambda: None)
        await asyncio.sleep(0.001)

    assert len(timers.list_all()) <= 3

    timers.clear()
    assert timers.list_all() == []
