"""Conversation sub-client for the thread simulator API.

This module provides ConversationsClient for a thread's messages and
reactions (/threads/{thread_id}/messages/*).

This is an internal module. Import from `client` instead.
"""

from client._base import BaseClient, _segment
from client.models import (
    GroupedMessagesResponse,
    Message,
    MessageListResponse,
    ReactionResponse,
    RemovalResponse,
)


class ConversationsClient(BaseClient):
    """Client for reading and writing conversations.

    Example:
        with ThreadSimClient() as client:
            sent = client.conversations.send(thread_id, "On my way")
            print(sent.delivery_status)  # sending
    """

    def _path(self, thread_id: str, *parts: str) -> str:
        path = f"/threads/{_segment(thread_id)}/messages"
        for part in parts:
            path += f"/{_segment(part)}"
        return path

    def list(self, thread_id: str) -> MessageListResponse:
        """Get a thread's messages in sort_key order.

        An unknown thread returns an empty list rather than an error.
        """
        data = self._get(self._path(thread_id))
        return MessageListResponse.model_validate(data)

    def grouped(self, thread_id: str, tz: str | None = None) -> GroupedMessagesResponse:
        """Get a thread's messages split into same-day runs.

        Args:
            thread_id: Thread to read.
            tz: IANA zone used to compute days; the server's zone when None.

        Raises:
            APIError: 400 if the zone is unknown.
        """
        data = self._get(f"{self._path(thread_id)}/grouped", params={"tz": tz})
        return GroupedMessagesResponse.model_validate(data)

    def send(self, thread_id: str, text: str) -> Message:
        """Send a message as the local user.

        Args:
            thread_id: Destination thread.
            text: Message body; surrounding whitespace is trimmed.

        Returns:
            The new message, with delivery_status "sending".

        Raises:
            NotFoundError: If the thread doesn't exist.
            APIError: 400 if the text is blank.
        """
        data = self._post(self._path(thread_id), json={"text": text})
        return Message.model_validate(data)

    def remove(self, thread_id: str, message_id: str) -> RemovalResponse:
        data = self._delete(self._path(thread_id, message_id))
        return RemovalResponse.model_validate(data)

    def add_reaction(
        self,
        thread_id: str,
        message_id: str,
        emoji: str,
        reactor_id: str | None = None,
        reactor_display_name: str | None = None,
    ) -> ReactionResponse:
        """React to a message; the local user reacts unless reactor_id is given."""
        body = {
            "emoji": emoji,
            "reactor_id": reactor_id,
            "reactor_display_name": reactor_display_name,
        }
        data = self._post(f"{self._path(thread_id, message_id)}/reactions", json=body)
        return ReactionResponse.model_validate(data)

    def remove_reaction(
        self, thread_id: str, message_id: str, reaction_id: str
    ) -> RemovalResponse:
        data = self._delete(f"{self._path(thread_id, message_id)}/reactions/{_segment(reaction_id)}")
        return RemovalResponse.model_validate(data)
