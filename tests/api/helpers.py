"""Helper functions for API integration tests."""

from typing import Any

from models.simulation import SimulationEngine


def first_thread_id(engine: SimulationEngine, group: bool = False) -> str:
    """Id of the first direct (or group) thread in the engine's list."""
    return next(
        t.id
        for t in engine.environment.threads.list_threads()
        if t.is_group == group and not t.is_note_to_self
    )


def note_to_self_id(engine: SimulationEngine) -> str:
    return next(t.id for t in engine.environment.threads.list_threads() if t.is_note_to_self)


def send_text(client, thread_id: str, text: str = "Hello") -> dict[str, Any]:
    """Send a message through the API and return the created message JSON."""
    response = client.post(f"/threads/{thread_id}/messages", json={"text": text})
    assert response.status_code == 200, response.json()
    return response.json()
