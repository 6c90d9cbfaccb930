"""Thread list sub-client for the thread simulator API.

This module provides ThreadsClient for the chat-list endpoints (/threads/*).

This is an internal module. Import from `client` instead.
"""

from client._base import BaseClient, _segment
from client.models import (
    FilterMode,
    MembersResponse,
    Thread,
    ThreadActionResponse,
    ThreadListResponse,
)


class ThreadsClient(BaseClient):
    """Client for the chat list.

    Example:
        with ThreadSimClient() as client:
            unread = client.threads.list(filter=FilterMode.UNREAD)
            for thread in unread.threads:
                client.threads.mark_as_read(thread.id)
    """

    _BASE_PATH = "/threads"

    def list(
        self,
        filter: FilterMode | str = FilterMode.NONE,
        search: str | None = None,
    ) -> ThreadListResponse:
        """List threads in chat-list order.

        Args:
            filter: "unread" keeps only unread threads.
            search: Case-insensitive substring of the display name.

        Returns:
            The matching threads.
        """
        params = {"filter": FilterMode(filter).value, "search": search}
        data = self._get(self._BASE_PATH, params=params)
        return ThreadListResponse.model_validate(data)

    def get(self, thread_id: str) -> Thread:
        """Get one thread.

        Raises:
            NotFoundError: If the thread doesn't exist.
        """
        data = self._get(f"{self._BASE_PATH}/{_segment(thread_id)}")
        return Thread.model_validate(data)

    def members(self, thread_id: str) -> MembersResponse:
        data = self._get(f"{self._BASE_PATH}/{_segment(thread_id)}/members")
        return MembersResponse.model_validate(data)

    def archive(self, thread_id: str) -> ThreadActionResponse:
        data = self._post(f"{self._BASE_PATH}/{_segment(thread_id)}/archive")
        return ThreadActionResponse.model_validate(data)

    def delete(self, thread_id: str) -> ThreadActionResponse:
        data = self._delete(f"{self._BASE_PATH}/{_segment(thread_id)}")
        return ThreadActionResponse.model_validate(data)

    def toggle_mute(self, thread_id: str) -> ThreadActionResponse:
        data = self._post(f"{self._BASE_PATH}/{_segment(thread_id)}/mute/toggle")
        return ThreadActionResponse.model_validate(data)

    def toggle_read(self, thread_id: str) -> ThreadActionResponse:
        data = self._post(f"{self._BASE_PATH}/{_segment(thread_id)}/read/toggle")
        return ThreadActionResponse.model_validate(data)

    def mark_as_read(self, thread_id: str) -> ThreadActionResponse:
        """Mark a thread read.

        Returns:
            The action result; changed is False when the thread was already read.
        """
        data = self._post(f"{self._BASE_PATH}/{_segment(thread_id)}/read")
        return ThreadActionResponse.model_validate(data)
