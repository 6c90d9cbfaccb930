"""Main thread simulator client class.

ThreadSimClient gives namespaced access to the API through sub-client
properties: client.threads, client.conversations and client.simulation.

Example:
    Synchronous usage::

        from client import ThreadSimClient

        with ThreadSimClient(base_url="http://localhost:8000") as client:
            client.simulation.start()
            thread = client.threads.list().threads[0]
            client.conversations.send(thread.id, "Hello")
            client.simulation.advance(seconds=3)
"""

from typing import Any

from client._conversations import ConversationsClient
from client._http import HTTPClient
from client._simulation import SimulationClient
from client._threads import ThreadsClient
from client.models import HealthResponse


class ThreadSimClient:
    """Synchronous client for the thread simulator REST API.

    Supports the context manager protocol for automatic resource cleanup.

    Attributes:
        base_url: The base URL of the server.
        timeout: Request timeout in seconds.
        retry_enabled: Whether automatic retry is enabled.
        max_retries: Maximum number of retry attempts.

    Example:
        Manual lifecycle management::

            client = ThreadSimClient()
            try:
                client.simulation.start()
                # ... do work ...
            finally:
                client.close()
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: Any = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: The base URL of the server (default: http://localhost:8000).
            timeout: Request timeout in seconds (default: 30.0).
            retry_enabled: Retry connection errors, timeouts and HTTP
                502/503/504 with exponential backoff (default: False).
            max_retries: Maximum number of retry attempts when retry is enabled
                (default: 3).
            transport: Custom HTTP transport (e.g., httpx.MockTransport for testing).
        """
        self.base_url = base_url
        self.timeout = timeout
        self.retry_enabled = retry_enabled
        self.max_retries = max_retries

        self._http = HTTPClient(
            base_url=base_url,
            timeout=timeout,
            retry_enabled=retry_enabled,
            max_retries=max_retries,
            transport=transport,
        )

        # Lazily created by the properties below
        self._threads: ThreadsClient | None = None
        self._conversations: ConversationsClient | None = None
        self._simulation: SimulationClient | None = None

    def __enter__(self) -> "ThreadSimClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the client and release resources."""
        self._http.close()

    @property
    def threads(self) -> ThreadsClient:
        """Access the chat list endpoints (/threads/*)."""
        if self._threads is None:
            self._threads = ThreadsClient(self._http)
        return self._threads

    @property
    def conversations(self) -> ConversationsClient:
        """Access message and reaction endpoints (/threads/{id}/messages/*)."""
        if self._conversations is None:
            self._conversations = ConversationsClient(self._http)
        return self._conversations

    @property
    def simulation(self) -> SimulationClient:
        """Access simulation control endpoints (/simulation/*)."""
        if self._simulation is None:
            self._simulation = SimulationClient(self._http)
        return self._simulation

    def health(self) -> HealthResponse:
        """Check server health.

        Raises:
            ConnectionError: If the server can't be reached.
        """
        return HealthResponse.model_validate(self._http.get("/health"))
