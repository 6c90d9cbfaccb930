"""Fixtures for SimulationClock."""

from datetime import datetime, timezone

from models.time import SimulationClock

# Fixed starting point so timestamps and sort keys are predictable
FIXED_START = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def create_simulation_clock(
    current_time: datetime | None = None,
    time_scale: float = 1.0,
    is_paused: bool = False,
    auto_advance: bool = False,
    **kwargs,
) -> SimulationClock:
    """Create a SimulationClock with sensible defaults.

    Args:
        current_time: Current simulator time (defaults to FIXED_START).
        time_scale: Time advancement multiplier (default: 1.0).
        is_paused: Whether time is frozen (default: False).
        auto_advance: Whether time auto-advances (default: False).
        **kwargs: Additional fields to override.

    Returns:
        SimulationClock instance ready for testing.
    """
    return SimulationClock(
        current_time=current_time or FIXED_START,
        time_scale=time_scale,
        is_paused=is_paused,
        last_wall_time_update=kwargs.get(
            "last_wall_time_update", datetime.now(timezone.utc)
        ),
        auto_advance=auto_advance,
    )
