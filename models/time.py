"""Simulator clock."""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class ClockMode(str, Enum):
    """How the clock is currently being driven."""

    PAUSED = "paused"
    MANUAL = "manual"
    REAL_TIME = "real_time"
    FAST_FORWARD = "fast_forward"
    SLOW_MOTION = "slow_motion"


class SimulationClock(BaseModel):
    """Simulator time, decoupled from the wall clock.

    Message timestamps, timer due times and delivery delays are all measured
    on this clock. It only moves when the engine moves it: explicitly via
    advance_time(), or from wall-clock elapsed time on each tick() while
    auto-advance is on.

    Args:
        current_time: Current simulator time (timezone-aware).
        time_scale: Simulator seconds per wall-clock second in auto-advance.
        is_paused: Whether auto-advance is frozen.
        last_wall_time_update: Wall-clock anchor for the next tick.
        auto_advance: Whether ticks follow the wall clock.
    """

    current_time: datetime = Field(description="Current simulator time")
    time_scale: float = Field(default=1.0, gt=0.0)
    is_paused: bool = False
    last_wall_time_update: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    auto_advance: bool = False

    @field_validator("current_time", "last_wall_time_update")
    @classmethod
    def validate_timezone_aware(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware."""
        if v.tzinfo is None:
            raise ValueError("Datetime must be timezone-aware (recommend UTC)")
        return v

    @classmethod
    def starting_at(cls, start: datetime) -> "SimulationClock":
        return cls(current_time=start, last_wall_time_update=datetime.now(timezone.utc))

    @property
    def mode(self) -> ClockMode:
        if self.is_paused:
            return ClockMode.PAUSED
        if not self.auto_advance:
            return ClockMode.MANUAL
        if self.time_scale == 1.0:
            return ClockMode.REAL_TIME
        if self.time_scale > 1.0:
            return ClockMode.FAST_FORWARD
        return ClockMode.SLOW_MOTION

    def calculate_advancement(self, wall_time_elapsed: timedelta) -> timedelta:
        """Scale elapsed wall time into simulator time (zero while paused)."""
        if self.is_paused or wall_time_elapsed <= timedelta(0):
            return timedelta(0)
        return timedelta(seconds=wall_time_elapsed.total_seconds() * self.time_scale)

    def set_time(self, new_time: datetime) -> None:
        """Move the clock forward to new_time.

        Raises:
            ValueError: If new_time is naive or earlier than current_time.
        """
        if new_time.tzinfo is None:
            raise ValueError("new_time must be timezone-aware")
        if new_time < self.current_time:
            raise ValueError(
                f"Cannot set time backwards: {new_time} < {self.current_time}"
            )
        self.current_time = new_time

    def touch_wall_anchor(self) -> None:
        """Re-anchor auto-advance at the current wall-clock time."""
        self.last_wall_time_update = datetime.now(timezone.utc)

    def pause(self) -> None:
        self.is_paused = True

    def resume(self) -> None:
        self.is_paused = False
        self.touch_wall_anchor()

    def set_scale(self, scale: float) -> None:
        if scale <= 0.0:
            raise ValueError(f"Time scale must be positive, got {scale}")
        self.time_scale = scale
        self.touch_wall_anchor()

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_time": self.current_time.isoformat(),
            "time_scale": self.time_scale,
            "is_paused": self.is_paused,
            "auto_advance": self.auto_advance,
            "mode": self.mode.value,
        }

    def validate(self) -> list[str]:
        """Validate clock consistency.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []
        if self.time_scale <= 0.0:
            errors.append(f"time_scale must be positive, got {self.time_scale}")
        if self.current_time.tzinfo is None:
            errors.append("current_time must be timezone-aware")
        return errors
