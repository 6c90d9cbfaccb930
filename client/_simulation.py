"""Simulation control sub-client for the thread simulator API.

This module provides SimulationClient for the simulation lifecycle and time
control endpoints (/simulation/*).

This is an internal module. Import from `client` instead.
"""

from typing import Any

from pydantic import BaseModel, Field

from client._base import BaseClient


# Response models for simulation endpoints


class StartSimulationResponse(BaseModel):
    """Response model for simulation start.

    Attributes:
        simulation_id: Unique identifier for this simulation.
        status: Current simulation status.
        mode: "manual" or "auto_advance".
        current_time: Current simulator time (ISO format string).
        time_scale: Time multiplier.
    """

    simulation_id: str
    status: str
    mode: str
    current_time: str
    time_scale: float | None = None


class StopSimulationResponse(BaseModel):
    simulation_id: str
    status: str
    final_time: str | None = None
    cancelled_tasks: int = 0


class SimulationStatusResponse(BaseModel):
    """Response model for simulation status.

    Attributes:
        simulation_id: Unique identifier for this simulation.
        is_running: Whether the generators are armed.
        mode: "manual" or "auto_advance".
        current_time: Current simulator time (ISO format string).
        thread_count: Threads in the chat list.
        message_count: Messages across all threads.
        pending_tasks: Scheduled timers not yet run.
        typing_thread_id: Thread of the active typing episode, if any.
    """

    simulation_id: str
    is_running: bool
    mode: str
    current_time: str
    thread_count: int
    message_count: int
    pending_tasks: int
    typing_thread_id: str | None = None


class AdvanceTimeResponse(BaseModel):
    current_time: str
    time_advanced: str
    tasks_executed: int
    execution_details: list[dict[str, Any]] = Field(default_factory=list)


class SimulationClient(BaseClient):
    """Client for simulation control.

    Example:
        with ThreadSimClient() as client:
            client.simulation.start()
            client.simulation.advance(seconds=30)
            print(client.simulation.status().message_count)
            client.simulation.stop()
    """

    _BASE_PATH = "/simulation"

    def start(self, auto_advance: bool = False, time_scale: float = 1.0) -> StartSimulationResponse:
        """Start the inbound-message and typing generators.

        Args:
            auto_advance: Advance simulator time with the wall clock.
            time_scale: Simulator seconds per wall second in auto-advance mode.

        Raises:
            ConflictError: If the simulation is already running.
        """
        data = self._post(
            f"{self._BASE_PATH}/start",
            json={"auto_advance": auto_advance, "time_scale": time_scale},
        )
        return StartSimulationResponse.model_validate(data)

    def stop(self) -> StopSimulationResponse:
        """Stop the generators.

        Raises:
            ConflictError: If the simulation isn't running.
        """
        data = self._post(f"{self._BASE_PATH}/stop")
        return StopSimulationResponse.model_validate(data)

    def status(self) -> SimulationStatusResponse:
        data = self._get(f"{self._BASE_PATH}/status")
        return SimulationStatusResponse.model_validate(data)

    def advance(self, seconds: float) -> AdvanceTimeResponse:
        """Advance simulator time, running every timer that falls due.

        Args:
            seconds: Simulator seconds to advance; must be positive.
        """
        data = self._post(f"{self._BASE_PATH}/advance", json={"seconds": seconds})
        return AdvanceTimeResponse.model_validate(data)

    def snapshot(self) -> dict[str, Any]:
        return self._get(f"{self._BASE_PATH}/snapshot")
