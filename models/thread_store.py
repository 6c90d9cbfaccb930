"""The chat list: thread records, group rosters and list-level projections."""

import logging
from typing import Any, Iterable, Optional

from models.conversation_store import ConversationStore
from models.message import Message
from models.notifications import ChangeNotifier
from models.thread import (
    DirectMessageSnippet,
    FilterMode,
    GroupMember,
    GroupMessageSnippet,
    MessageStatus,
    Thread,
)

logger = logging.getLogger(__name__)


class ThreadStore:
    """Ordered list of threads plus the members of each group.

    Threads keep the position they were added at; no mutation re-sorts the
    list. Every mutation replaces the record at its index with a new Thread
    and publishes a THREADS event carrying the full list. Removing a thread
    also discards its members and its message collection.

    Args:
        conversations: Message collections, cleared when a thread goes away.
        notifier: Hub that receives change events. Defaults to the
            conversation store's notifier.
        user_id: Member id of the local user.
    """

    def __init__(
        self,
        conversations: ConversationStore,
        notifier: Optional[ChangeNotifier] = None,
        user_id: str = "me",
    ) -> None:
        self.conversations = conversations
        self.notifier = notifier or conversations.notifier
        self.user_id = user_id
        self._threads: list[Thread] = []
        self._members: dict[str, list[GroupMember]] = {}

    @property
    def thread_count(self) -> int:
        return len(self._threads)

    # ===== Queries =====

    def list_threads(
        self,
        filter_mode: FilterMode = FilterMode.NONE,
        search_text: Optional[str] = None,
    ) -> list[Thread]:
        """List threads in stored order.

        Args:
            filter_mode: UNREAD keeps only threads with unread messages.
            search_text: Case-insensitive substring matched against
                display_name. Blank text matches everything.

        Returns:
            Matching threads.
        """
        threads = list(self._threads)
        if filter_mode == FilterMode.UNREAD:
            threads = [t for t in threads if t.has_unread_messages]
        if search_text and search_text.strip():
            needle = search_text.strip().lower()
            threads = [t for t in threads if needle in t.display_name.lower()]
        return threads

    def get_thread(self, thread_id: str) -> Optional[Thread]:
        index = self._index_of(thread_id)
        return self._threads[index] if index is not None else None

    def members_for_thread(self, thread_id: str) -> list[GroupMember]:
        """Members of a group thread (empty for 1:1 or unknown threads)."""
        return list(self._members.get(thread_id, []))

    def participant_names_for_thread(self, thread_id: str) -> list[str]:
        """Display names of every member except the local user."""
        return [
            m.name for m in self._members.get(thread_id, []) if m.id != self.user_id
        ]

    def is_group_thread(self, thread_id: str) -> bool:
        thread = self.get_thread(thread_id)
        return thread is not None and thread.is_group

    # ===== Mutations =====

    def add_thread(
        self, thread: Thread, members: Optional[Iterable[GroupMember]] = None
    ) -> Thread:
        """Append a thread to the end of the list.

        Args:
            thread: Thread to add.
            members: Group roster, stored beside the thread.

        Returns:
            The added thread.

        Raises:
            ValueError: If a thread with the same id already exists.
        """
        if self._index_of(thread.id) is not None:
            raise ValueError(f"Thread {thread.id} already exists")

        self._threads.append(thread)
        if members is not None:
            self._members[thread.id] = list(members)
        self._publish()
        return thread

    def archive_thread(self, thread_id: str) -> bool:
        """Remove a thread along with its members and messages.

        Returns:
            True if the thread existed.
        """
        return self._remove(thread_id, "Archived")

    def delete_thread(self, thread_id: str) -> bool:
        """Remove a thread along with its members and messages.

        Returns:
            True if the thread existed.
        """
        return self._remove(thread_id, "Deleted")

    def toggle_mute(self, thread_id: str) -> Optional[Thread]:
        thread = self.get_thread(thread_id)
        if thread is None:
            return None
        return self._replace(thread, is_muted=not thread.is_muted)

    def toggle_read(self, thread_id: str) -> Optional[Thread]:
        """Flip the unread flag.

        Turning unread on sets unread_count to 1, turning it off sets 0.

        Returns:
            The replacement thread, or None for an unknown id.
        """
        thread = self.get_thread(thread_id)
        if thread is None:
            return None
        unread = not thread.has_unread_messages
        return self._replace(
            thread,
            has_unread_messages=unread,
            unread_count=1 if unread else 0,
        )

    def mark_as_read(self, thread_id: str) -> Optional[Thread]:
        """Zero a thread's unread state.

        A thread that is already read is left untouched and nothing is
        published.

        Returns:
            The replacement thread, or None when nothing changed.
        """
        thread = self.get_thread(thread_id)
        if thread is None or not thread.has_unread_messages:
            return None
        return self._replace(thread, has_unread_messages=False, unread_count=0)

    def set_typing(self, thread_id: str, is_typing: bool) -> Optional[Thread]:
        thread = self.get_thread(thread_id)
        if thread is None or thread.is_typing == is_typing:
            return None
        return self._replace(thread, is_typing=is_typing)

    def record_last_message(
        self,
        thread_id: str,
        message: Message,
        status: Optional[MessageStatus] = None,
        sender_name: Optional[str] = None,
    ) -> Optional[Thread]:
        """Project a message onto the thread's snippet, date and status.

        Args:
            thread_id: Thread to update.
            message: The thread's new last message.
            status: List-level status to show (outgoing messages only).
            sender_name: Author name for incoming group messages. Defaults to
                the message's author_display_name.

        Returns:
            The replacement thread, or None for an unknown id.
        """
        thread = self.get_thread(thread_id)
        if thread is None:
            return None
        return self._replace(thread, **self._projection(thread, message, status, sender_name))

    def record_incoming(
        self,
        thread_id: str,
        message: Message,
        sender_name: Optional[str] = None,
    ) -> Optional[Thread]:
        """Apply an inbound message to the thread in a single replacement.

        Increments unread_count, marks the thread unread, clears the typing
        flag and refreshes the snippet projection.

        Returns:
            The replacement thread, or None for an unknown id.
        """
        thread = self.get_thread(thread_id)
        if thread is None:
            return None
        changes = self._projection(thread, message, None, sender_name)
        changes.update(
            has_unread_messages=True,
            unread_count=thread.unread_count + 1,
            is_typing=False,
        )
        return self._replace(thread, **changes)

    def set_last_message_status(
        self, thread_id: str, status: Optional[MessageStatus]
    ) -> Optional[Thread]:
        thread = self.get_thread(thread_id)
        if thread is None or thread.last_message_status == status:
            return None
        return self._replace(thread, last_message_status=status)

    def clear(self) -> None:
        """Remove every thread and roster without publishing."""
        self._threads.clear()
        self._members.clear()

    def validate(self) -> list[str]:
        """Check record uniqueness and roster consistency.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []
        ids = [t.id for t in self._threads]
        if len(ids) != len(set(ids)):
            errors.append("Duplicate thread ids in thread list")
        for thread_id in self._members:
            if thread_id not in ids:
                errors.append(f"Members stored for unknown thread {thread_id}")
        for thread in self._threads:
            if thread.is_note_to_self and thread.is_group:
                errors.append(f"Thread {thread.id} is both note-to-self and a group")
        return errors

    # ===== Helpers =====

    def _index_of(self, thread_id: str) -> Optional[int]:
        for index, thread in enumerate(self._threads):
            if thread.id == thread_id:
                return index
        return None

    def _replace(self, thread: Thread, **changes: Any) -> Thread:
        updated = thread.with_updates(**changes)
        index = self._index_of(thread.id)
        self._threads[index] = updated
        self._publish()
        return updated

    def _remove(self, thread_id: str, action: str) -> bool:
        index = self._index_of(thread_id)
        if index is None:
            return False

        thread = self._threads.pop(index)
        self._members.pop(thread_id, None)
        self.conversations.drop_thread(thread_id)
        self._publish()

        logger.info(f"{action} thread {thread_id} ({thread.display_name})")
        return True

    def _projection(
        self,
        thread: Thread,
        message: Message,
        status: Optional[MessageStatus],
        sender_name: Optional[str],
    ) -> dict[str, Any]:
        text = message.preview_text
        sender = sender_name or message.author_display_name
        if thread.is_group and not message.is_outgoing and sender:
            snippet = GroupMessageSnippet(
                message_text=text,
                sender_name=GroupMember(id=message.author_id, name=sender).first_name,
            )
        else:
            snippet = DirectMessageSnippet(message_text=text)
        return {
            "last_message_snippet": snippet,
            "last_message_date": message.timestamp,
            "last_message_status": status if message.is_outgoing else None,
        }

    def _publish(self) -> None:
        self.notifier.publish_threads(list(self._threads))
