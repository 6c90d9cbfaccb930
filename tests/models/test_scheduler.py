"""Unit tests for Scheduler and ScheduledTask."""

from datetime import timedelta

import pytest

from models.scheduler import Scheduler, TaskStatus
from tests.fixtures.core.times import FIXED_START


def noop():
    pass


class TestScheduledTask:
    """Tests for task execution and cancellation."""

    def test_run_success(self):
        calls = []
        task = Scheduler().schedule(FIXED_START, timedelta(0), lambda: calls.append(1))

        task.run()

        assert calls == [1]
        assert task.status == TaskStatus.EXECUTED

    def test_run_failure_is_recorded(self):
        def broken():
            raise ValueError("bad input")

        task = Scheduler().schedule(FIXED_START, timedelta(0), broken)

        task.run()

        assert task.status == TaskStatus.FAILED
        assert task.error_message == "ValueError: bad input"

    def test_cannot_run_twice(self):
        task = Scheduler().schedule(FIXED_START, timedelta(0), noop)
        task.run()

        with pytest.raises(RuntimeError):
            task.run()

    def test_cancel(self):
        task = Scheduler().schedule(FIXED_START, timedelta(seconds=1), noop)

        assert task.cancel() is True
        assert task.cancel() is False
        assert task.status == TaskStatus.CANCELLED

    def test_to_dict_excludes_callback(self):
        task = Scheduler().schedule(FIXED_START, timedelta(seconds=1), noop, "inbound", "tick")

        data = task.to_dict()

        assert data["group"] == "inbound"
        assert data["label"] == "tick"
        assert "callback" not in task.model_dump()


class TestScheduler:
    """Tests for queue ordering and group cancellation."""

    def test_orders_by_due_time(self):
        scheduler = Scheduler()
        late = scheduler.schedule(FIXED_START, timedelta(seconds=5), noop)
        early = scheduler.schedule(FIXED_START, timedelta(seconds=1), noop)

        assert scheduler.tasks == [early, late]
        assert scheduler.next_due_time == FIXED_START + timedelta(seconds=1)

    def test_equal_due_times_run_in_submission_order(self):
        scheduler = Scheduler()
        first = scheduler.schedule(FIXED_START, timedelta(seconds=1), noop)
        second = scheduler.schedule(FIXED_START, timedelta(seconds=1), noop)

        assert scheduler.pop_due(FIXED_START + timedelta(seconds=1)) is first
        assert scheduler.pop_due(FIXED_START + timedelta(seconds=1)) is second

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            Scheduler().schedule(FIXED_START, timedelta(seconds=-1), noop)

    def test_pop_due_respects_time(self):
        scheduler = Scheduler()
        scheduler.schedule(FIXED_START, timedelta(seconds=2), noop)

        assert scheduler.pop_due(FIXED_START + timedelta(seconds=1)) is None
        assert scheduler.pop_due(FIXED_START + timedelta(seconds=2)) is not None
        assert scheduler.pending_count == 0

    def test_cancel_group(self):
        scheduler = Scheduler()
        scheduler.schedule(FIXED_START, timedelta(seconds=1), noop, group="typing")
        scheduler.schedule(FIXED_START, timedelta(seconds=2), noop, group="typing")
        kept = scheduler.schedule(FIXED_START, timedelta(seconds=3), noop, group="delivery")

        assert scheduler.cancel_group("typing") == 2

        assert scheduler.tasks == [kept]
        assert scheduler.pending_in_group("typing") == []
        assert scheduler.cancel_group("typing") == 0

    def test_cancelled_task_is_skipped(self):
        scheduler = Scheduler()
        cancelled = scheduler.schedule(FIXED_START, timedelta(seconds=1), noop)
        kept = scheduler.schedule(FIXED_START, timedelta(seconds=2), noop)

        cancelled.cancel()

        assert scheduler.peek_next() is kept

    def test_run_task_counts(self):
        scheduler = Scheduler()

        def broken():
            raise RuntimeError("boom")

        scheduler.run_task(scheduler.schedule(FIXED_START, timedelta(0), noop))
        scheduler.run_task(scheduler.schedule(FIXED_START, timedelta(0), broken))

        assert scheduler.executed_count == 1
        assert scheduler.failed_count == 1

    def test_clear(self):
        scheduler = Scheduler()
        task = scheduler.schedule(FIXED_START, timedelta(seconds=1), noop)

        scheduler.clear()

        assert scheduler.pending_count == 0
        assert task.status == TaskStatus.CANCELLED

    def test_to_dict(self):
        scheduler = Scheduler()
        scheduler.schedule(FIXED_START, timedelta(seconds=1), noop, label="next")

        data = scheduler.to_dict()

        assert data["pending_tasks"] == 1
        assert data["next_task"]["label"] == "next"
        assert scheduler.validate() == []
