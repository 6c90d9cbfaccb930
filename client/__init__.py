"""Thread simulator API client library.

A typed Python client for the thread simulator REST API.

Example:
    Synchronous usage::

        from client import ThreadSimClient

        with ThreadSimClient(base_url="http://localhost:8000") as client:
            client.simulation.start()
            unread = client.threads.list(filter="unread")

Exports:
    ThreadSimClient: Synchronous client for the REST API.

    Exceptions:
        ThreadSimClientError: Base exception for all client errors.
        ConnectionError: Failed to connect to the server.
        TimeoutError: Request timed out.
        APIError: Server returned an error response.
        ValidationError: Request validation failed (HTTP 422).
        NotFoundError: Thread or message not found (HTTP 404).
        ConflictError: State conflict (HTTP 409).
        ServerError: Server-side error (HTTP 5xx).
"""

from client._conversations import ConversationsClient
from client._simulation import (
    AdvanceTimeResponse,
    SimulationClient,
    SimulationStatusResponse,
    StartSimulationResponse,
    StopSimulationResponse,
)
from client._threads import ThreadsClient
from client.client import ThreadSimClient
from client.exceptions import (
    APIError,
    ConflictError,
    ConnectionError,
    NotFoundError,
    ServerError,
    ThreadSimClientError,
    TimeoutError,
    ValidationError,
)
from client.models import (
    DeliveryStatus,
    FilterMode,
    GroupedMessagesResponse,
    GroupMember,
    HealthResponse,
    MembersResponse,
    Message,
    MessageGroup,
    MessageListResponse,
    MessageStatus,
    Reaction,
    ReactionResponse,
    RemovalResponse,
    Thread,
    ThreadActionResponse,
    ThreadListResponse,
)

__all__ = [
    # Main client
    "ThreadSimClient",
    # Sub-clients
    "ConversationsClient",
    "SimulationClient",
    "ThreadsClient",
    # Exceptions
    "APIError",
    "ConflictError",
    "ConnectionError",
    "NotFoundError",
    "ServerError",
    "ThreadSimClientError",
    "TimeoutError",
    "ValidationError",
    # Models
    "AdvanceTimeResponse",
    "DeliveryStatus",
    "FilterMode",
    "GroupedMessagesResponse",
    "GroupMember",
    "HealthResponse",
    "MembersResponse",
    "Message",
    "MessageGroup",
    "MessageListResponse",
    "MessageStatus",
    "Reaction",
    "ReactionResponse",
    "RemovalResponse",
    "SimulationStatusResponse",
    "StartSimulationResponse",
    "StopSimulationResponse",
    "Thread",
    "ThreadActionResponse",
    "ThreadListResponse",
]
