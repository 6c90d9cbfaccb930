"""Simulation lifecycle and time control endpoints."""

from datetime import timedelta
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from api.dependencies import SimulationEngineDep
from api.exceptions import SimulationNotRunningError

router = APIRouter(
    prefix="/simulation",
    tags=["simulation"],
)


# Request/Response Models


class StartSimulationRequest(BaseModel):
    """Request model for starting simulation.

    Attributes:
        auto_advance: Enable automatic time advancement.
        time_scale: Time multiplier for auto-advance mode.
    """

    auto_advance: bool = Field(default=False)
    time_scale: float = Field(default=1.0, gt=0)


class StartSimulationResponse(BaseModel):
    simulation_id: str
    status: str
    mode: str
    current_time: str
    time_scale: Optional[float] = None


class StopSimulationResponse(BaseModel):
    """Response model for simulation stop.

    Attributes:
        simulation_id: Unique identifier for this simulation.
        status: Current simulation status.
        final_time: Simulator time when stopped.
        cancelled_tasks: Generator timers that were cancelled.
    """

    simulation_id: str
    status: str
    final_time: Optional[str] = None
    cancelled_tasks: int = 0


class SimulationStatusResponse(BaseModel):
    """Response model for simulation status.

    Attributes:
        simulation_id: Unique identifier for this simulation.
        is_running: Whether the generators are armed.
        mode: "manual" or "auto_advance".
        current_time: Current simulator time.
        thread_count: Threads in the chat list.
        message_count: Messages across all threads.
        pending_tasks: Scheduled timers not yet run.
        typing_thread_id: Thread of the active typing episode.
    """

    simulation_id: str
    is_running: bool
    mode: str
    current_time: str
    thread_count: int
    message_count: int
    pending_tasks: int
    typing_thread_id: Optional[str] = None


class AdvanceTimeRequest(BaseModel):
    seconds: float = Field(gt=0, description="Simulator seconds to advance")


class AdvanceTimeResponse(BaseModel):
    current_time: str
    time_advanced: str
    tasks_executed: int
    execution_details: list[dict[str, Any]] = Field(default_factory=list)


# Route Handlers


@router.post("/start", response_model=StartSimulationResponse)
async def start_simulation(request: StartSimulationRequest, engine: SimulationEngineDep):
    """Start the inbound-message and typing generators.

    Args:
        request: Configuration for starting the simulation.
        engine: The SimulationEngine instance (injected by FastAPI).

    Returns:
        Simulation startup details.

    Raises:
        HTTPException: 409 if the simulation is already running.
    """
    try:
        result = engine.start(
            auto_advance=request.auto_advance,
            time_scale=request.time_scale,
        )
    except RuntimeError as e:
        # Already running
        raise HTTPException(status_code=409, detail=str(e))
    return StartSimulationResponse(**result)


@router.post("/stop", response_model=StopSimulationResponse)
async def stop_simulation(engine: SimulationEngineDep):
    """Stop the generators; state and pending deliveries are left alone.

    Raises:
        SimulationNotRunningError: If the simulation isn't running.
    """
    if not engine.is_running:
        raise SimulationNotRunningError("Cannot stop: simulation is not running")
    return StopSimulationResponse(**engine.stop())


@router.get("/status", response_model=SimulationStatusResponse)
async def get_simulation_status(engine: SimulationEngineDep):
    return SimulationStatusResponse(**engine.get_status())


@router.post("/advance", response_model=AdvanceTimeResponse)
async def advance_time(request: AdvanceTimeRequest, engine: SimulationEngineDep):
    """Advance simulator time, running every timer that falls due.

    Works while stopped too, so pending deliveries can still complete.
    """
    result = engine.advance_time(timedelta(seconds=request.seconds))
    return AdvanceTimeResponse(**result)


@router.get("/snapshot")
async def get_snapshot(engine: SimulationEngineDep) -> dict[str, Any]:
    return engine.get_snapshot()
