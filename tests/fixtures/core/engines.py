"""Fixtures for SimulationEngine."""

import random

import pytest

from models.config import SimulationConfig
from models.environment import MessagingEnvironment
from models.seed import load_seed_data
from models.simulation import SimulationEngine
from tests.fixtures.core.environments import create_environment


def create_config(**overrides) -> SimulationConfig:
    """Create a seeded SimulationConfig that does not load demo data."""
    values = {"random_seed": 42, "load_seed_data": False}
    values.update(overrides)
    return SimulationConfig(**values)


def create_engine(
    environment: MessagingEnvironment | None = None,
    **config_overrides,
) -> SimulationEngine:
    """Create a SimulationEngine with sensible defaults.

    Args:
        environment: Environment to drive (defaults to an empty one).
        **config_overrides: SimulationConfig fields to override.

    Returns:
        SimulationEngine instance ready for testing (not started).
    """
    config = create_config(**config_overrides)
    if environment is None:
        environment = create_environment(user_id=config.user_id)
    return SimulationEngine(environment=environment, config=config)


def create_seeded_engine(seed: int = 42, **config_overrides) -> SimulationEngine:
    """Create an engine populated with the demo dataset."""
    engine = create_engine(random_seed=seed, **config_overrides)
    load_seed_data(engine.environment, rng=random.Random(seed))
    return engine


@pytest.fixture
def engine():
    """Provide an engine around an empty environment.

    Stops the engine afterwards in case a test left it running.
    """
    engine = create_engine()
    yield engine
    if engine.is_running:
        engine.stop()


@pytest.fixture
def seeded_engine():
    """Provide an engine populated with the demo dataset."""
    engine = create_seeded_engine()
    yield engine
    if engine.is_running:
        engine.stop()
