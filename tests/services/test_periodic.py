# tests/services/test_periodic.py
"""Tests for background sweep scheduling."""

from __future__ import annotations

import asyncio

import pytest

from forum_core.services import PeriodicTask


@pytest.mark.asyncio
async def test_runs_repeatedly_until_stopped() -> None:
    calls: list[int] = []
    task = PeriodicTask("counter", 0.01, lambda: calls.append(1))

    await task.start()
    assert task.running
    await asyncio.sleep(0.1)
    await task.stop()

    assert not task.running
    seen = len(calls)
    assert seen >= 2
    await asyncio.sleep(0.05)
    assert len(calls) == seen


@pytest.mark.asyncio
async def test_failures_do_not_stop_the_schedule() -> None:
    calls: list[int] = []

    def flaky() -> None:
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")

    task = PeriodicTask("flaky", 0.01, flaky)

    await task.start()
    await asyncio.sleep(0.1)
    await task.stop()

    assert len(calls) >= 2


@pytest.mark.asyncio
async def test_stop_without_start_is_noop() -> None:
    task = PeriodicTask("idle", 1.0, lambda: None)

    await task.stop()

    assert not task.running


@pytest.mark.asyncio
async def test_run_once_logs_and_swallows_errors(caplog) -> None:
    def fail() -> None:
        raise ValueError("nope")

    task = PeriodicTask("broken", 1.0, fail)

    await task.run_once()

    assert "Periodic task broken failed" in caplog.text


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        PeriodicTask("bad", 0, lambda: None)


@pytest.mark.asyncio
async def test_background_tasks_sweep_services(services, make_user) -> None:
    tasks = services.background_tasks()

    assert [task.name for task in tasks] == ["session-expiry", "rate-limit-eviction"]
    for task in tasks:
        await task.run_once()
