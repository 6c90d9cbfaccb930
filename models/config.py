"""Simulation configuration."""

import os
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

ENV_PREFIX = "THREADSIM_"


class SimulationConfig(BaseModel):
    """Tunables for the simulation engine, passed in at construction.

    All durations are in simulator seconds.

    Args:
        user_id: Member id of the local user.
        user_display_name: Display name of the local user.
        inbound_interval_min: Shortest wait between inbound messages.
        inbound_interval_max: Longest wait between inbound messages.
        typing_duration_min: Shortest typing episode.
        typing_duration_max: Longest typing episode.
        typing_rearm_min: Shortest pause between typing episodes.
        typing_rearm_max: Longest pause between typing episodes.
        typing_min_threads: Typing episodes only start once the store holds
            at least this many threads.
        delivered_delay: Time from send to DELIVERED.
        read_delay: Time from DELIVERED to READ.
        failure_rate: Probability that a send fails instead of delivering.
        random_seed: Seed for reproducible runs (None means unseeded).
        load_seed_data: Whether the API server starts with demo threads.
    """

    user_id: str = Field(default="me", min_length=1)
    user_display_name: str = "Me"
    inbound_interval_min: float = Field(default=8.0, gt=0.0)
    inbound_interval_max: float = Field(default=15.0, gt=0.0)
    typing_duration_min: float = Field(default=2.0, gt=0.0)
    typing_duration_max: float = Field(default=4.0, gt=0.0)
    typing_rearm_min: float = Field(default=5.0, gt=0.0)
    typing_rearm_max: float = Field(default=12.0, gt=0.0)
    typing_min_threads: int = Field(default=3, ge=0)
    delivered_delay: float = Field(default=1.0, ge=0.0)
    read_delay: float = Field(default=1.5, ge=0.0)
    failure_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    random_seed: Optional[int] = None
    load_seed_data: bool = True

    @model_validator(mode="after")
    def validate_bounds(self) -> "SimulationConfig":
        """Ensure every min does not exceed its max."""
        for name in ("inbound_interval", "typing_duration", "typing_rearm"):
            low = getattr(self, f"{name}_min")
            high = getattr(self, f"{name}_max")
            if low > high:
                raise ValueError(f"{name}_min ({low}) must not exceed {name}_max ({high})")
        return self

    @classmethod
    def from_env(cls, **overrides: Any) -> "SimulationConfig":
        """Build a config from THREADSIM_* environment variables.

        THREADSIM_INBOUND_INTERVAL_MIN sets inbound_interval_min, and so on.
        Unset variables keep their defaults; keyword overrides win over the
        environment.

        Returns:
            Validated SimulationConfig.
        """
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        values.update(overrides)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
