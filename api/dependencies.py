"""Dependency injection providers for the FastAPI application.

This module defines dependencies that can be injected into route handlers,
providing access to the shared SimulationEngine.
"""

import logging
import random
from typing import Annotated, Optional

from fastapi import Depends

from models.config import SimulationConfig
from models.seed import load_seed_data
from models.simulation import SimulationEngine

logger = logging.getLogger(__name__)

# One engine per process, created at app startup
_simulation_engine: SimulationEngine | None = None


def get_simulation_engine() -> SimulationEngine:
    """Get the shared SimulationEngine instance.

    Returns:
        The shared SimulationEngine instance.

    Raises:
        RuntimeError: If the engine hasn't been initialized yet.
    """
    if _simulation_engine is None:
        raise RuntimeError(
            "SimulationEngine not initialized. Call initialize_simulation_engine() first."
        )
    return _simulation_engine


def initialize_simulation_engine(
    config: Optional[SimulationConfig] = None,
) -> SimulationEngine:
    """Create the shared SimulationEngine.

    Called once when the FastAPI app starts up. The configuration defaults
    to SimulationConfig.from_env(); when it asks for seed data the demo
    threads are loaded, using random_seed for reproducible content.

    Args:
        config: Explicit configuration (skips the environment lookup).

    Returns:
        The newly created SimulationEngine instance.
    """
    global _simulation_engine

    config = config or SimulationConfig.from_env()
    engine = SimulationEngine.create(config=config)

    if config.load_seed_data:
        load_seed_data(
            engine.environment,
            rng=random.Random(config.random_seed),
            user_name=config.user_display_name,
        )

    _simulation_engine = engine
    logger.info(
        f"SimulationEngine {engine.simulation_id} initialized with "
        f"{engine.environment.threads.thread_count} threads"
    )
    return engine


def shutdown_simulation_engine() -> None:
    """Stop any running simulation and drop the shared engine."""
    global _simulation_engine

    if _simulation_engine is not None and _simulation_engine.is_running:
        _simulation_engine.stop()

    _simulation_engine = None


SimulationEngineDep = Annotated[SimulationEngine, Depends(get_simulation_engine)]
