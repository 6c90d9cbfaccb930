"""Cancellable tasks scheduled on simulator time."""

import bisect
import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    """Status of a scheduled task."""

    PENDING = "pending"
    EXECUTED = "executed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class ScheduledTask(BaseModel):
    """A callback due at a point in simulator time.

    The task object doubles as the cancellation token returned by
    Scheduler.schedule().

    Args:
        task_id: Unique identifier for this task.
        due_time: Simulator time at which the task runs.
        sequence: Submission order, breaks ties between equal due times.
        group: Name used to cancel related tasks together.
        label: Short description for logs and snapshots.
        callback: Zero-argument callable run when the task is due.
        status: Current execution state.
        error_message: Error details if status is FAILED.
    """

    task_id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique identifier for this task",
    )
    due_time: datetime = Field(description="When this task should run (simulator time)")
    sequence: int = Field(default=0, description="Submission order")
    group: str = Field(default="default", description="Cancellation group")
    label: str = Field(default="", description="Short description")
    callback: Callable[[], Any] = Field(exclude=True)
    status: TaskStatus = TaskStatus.PENDING
    error_message: Optional[str] = None

    class Config:
        arbitrary_types_allowed = True

    @property
    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING

    def cancel(self) -> bool:
        """Cancel the task if it has not run yet.

        Returns:
            True if the task was pending and is now cancelled.
        """
        if self.status != TaskStatus.PENDING:
            return False
        self.status = TaskStatus.CANCELLED
        return True

    def run(self) -> None:
        """Run the callback, recording failure instead of raising."""
        if self.status != TaskStatus.PENDING:
            raise RuntimeError(
                f"Cannot run task {self.task_id} with status {self.status.value}"
            )

        try:
            self.callback()
            self.status = TaskStatus.EXECUTED
        except Exception as e:
            self.status = TaskStatus.FAILED
            self.error_message = f"{type(e).__name__}: {str(e)}"
            logger.error(
                f"Scheduled task {self.label or self.task_id} failed: {e}",
                exc_info=True,
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "due_time": self.due_time.isoformat(),
            "group": self.group,
            "label": self.label,
            "status": self.status.value,
        }


class Scheduler(BaseModel):
    """Pending tasks ordered by (due_time, sequence).

    Tasks leave the queue once they run or are cancelled; only counters are
    kept, so an indefinitely running simulation does not accumulate history.

    Args:
        tasks: Pending tasks in execution order.
        executed_count: Number of tasks that ran successfully.
        failed_count: Number of tasks whose callback raised.
    """

    tasks: list[ScheduledTask] = Field(default_factory=list)
    executed_count: int = 0
    failed_count: int = 0
    next_sequence: int = 0

    class Config:
        arbitrary_types_allowed = True

    @property
    def pending_count(self) -> int:
        return sum(1 for t in self.tasks if t.is_pending)

    @property
    def next_due_time(self) -> Optional[datetime]:
        task = self.peek_next()
        return task.due_time if task else None

    def schedule(
        self,
        now: datetime,
        delay: timedelta,
        callback: Callable[[], Any],
        group: str = "default",
        label: str = "",
    ) -> ScheduledTask:
        """Submit a callback to run after a delay.

        Args:
            now: Current simulator time.
            delay: How long to wait (zero runs on the next advance).
            callback: Zero-argument callable.
            group: Cancellation group.
            label: Short description for logs.

        Returns:
            The scheduled task, usable as a cancellation token.

        Raises:
            ValueError: If delay is negative.
        """
        if delay < timedelta(0):
            raise ValueError(f"Task delay cannot be negative, got {delay}")

        task = ScheduledTask(
            due_time=now + delay,
            sequence=self.next_sequence,
            group=group,
            label=label,
            callback=callback,
        )
        self.next_sequence += 1

        index = bisect.bisect_right(
            self.tasks, (task.due_time, task.sequence), key=lambda t: (t.due_time, t.sequence)
        )
        self.tasks.insert(index, task)

        logger.debug(f"Scheduled {label or task.task_id} ({group}) at {task.due_time}")
        return task

    def peek_next(self) -> Optional[ScheduledTask]:
        """Get the earliest pending task without removing it."""
        self._discard_cancelled()
        return self.tasks[0] if self.tasks else None

    def pop_due(self, current_time: datetime) -> Optional[ScheduledTask]:
        """Remove and return the earliest task due at or before current_time."""
        task = self.peek_next()
        if task is None or task.due_time > current_time:
            return None
        return self.tasks.pop(0)

    def run_task(self, task: ScheduledTask) -> None:
        task.run()
        if task.status == TaskStatus.EXECUTED:
            self.executed_count += 1
        else:
            self.failed_count += 1

    def cancel_group(self, group: str) -> int:
        """Cancel every pending task in a group.

        Returns:
            Number of tasks cancelled.
        """
        cancelled = 0
        for task in self.tasks:
            if task.group == group and task.cancel():
                cancelled += 1
        self._discard_cancelled()
        if cancelled:
            logger.debug(f"Cancelled {cancelled} {group} tasks")
        return cancelled

    def pending_in_group(self, group: str) -> list[ScheduledTask]:
        return [t for t in self.tasks if t.is_pending and t.group == group]

    def clear(self) -> None:
        """Cancel and drop everything."""
        for task in self.tasks:
            task.cancel()
        self.tasks = []

    def validate(self) -> list[str]:
        """Check queue ordering.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []
        keys = [(t.due_time, t.sequence) for t in self.tasks]
        if keys != sorted(keys):
            errors.append("Scheduled tasks not sorted by due time")
        return errors

    def to_dict(self) -> dict[str, Any]:
        next_task = self.peek_next()
        return {
            "pending_tasks": self.pending_count,
            "executed_tasks": self.executed_count,
            "failed_tasks": self.failed_count,
            "next_task": next_task.to_dict() if next_task else None,
        }

    def _discard_cancelled(self) -> None:
        if any(not t.is_pending for t in self.tasks):
            self.tasks = [t for t in self.tasks if t.is_pending]
