"""Shared fixtures for API integration tests.

This module provides the TestClient wired to a fresh SimulationEngine via
FastAPI's dependency override system.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_simulation_engine
from main import app


@pytest.fixture
def client_with_engine(fresh_engine):
    """Provide a TestClient with a fresh, not yet started engine injected.

    Args:
        fresh_engine: A pytest fixture providing a seeded SimulationEngine.

    Yields:
        A tuple of (TestClient, SimulationEngine) for testing.

    Example:
        def test_something(client_with_engine):
            client, engine = client_with_engine
            response = client.get("/threads")
            assert response.status_code == 200
    """
    app.dependency_overrides[get_simulation_engine] = lambda: fresh_engine
    client = TestClient(app)

    yield client, fresh_engine

    if fresh_engine.is_running:
        fresh_engine.stop()
    app.dependency_overrides.clear()


@pytest.fixture
def running_client(client_with_engine):
    """Like client_with_engine, with the simulation started in manual mode."""
    client, engine = client_with_engine
    response = client.post("/simulation/start", json={"auto_advance": False})
    assert response.status_code == 200, f"Failed to start simulation: {response.json()}"
    return client, engine

