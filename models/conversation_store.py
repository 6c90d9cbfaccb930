"""Per-thread message collections."""

import logging
from datetime import datetime, tzinfo
from typing import Iterable, Optional

from models.message import Message, MessageGroup
from models.notifications import ChangeNotifier

logger = logging.getLogger(__name__)


def group_by_date(
    messages: Iterable[Message], tz: Optional[tzinfo] = None
) -> list[MessageGroup]:
    """Split messages into contiguous runs sharing a calendar day.

    This is a single pass over the input in the order given: a new group
    starts whenever the day differs from the previous message's day, so a
    day that appears twice non-contiguously yields two groups.

    Args:
        messages: Messages in display order.
        tz: Zone used to compute the calendar day. None means the process
            local zone.

    Returns:
        List of MessageGroup in input order.
    """
    groups: list[MessageGroup] = []
    for message in messages:
        day = message.timestamp.astimezone(tz).date()
        if groups and groups[-1].date == day:
            groups[-1].messages.append(message)
        else:
            groups.append(MessageGroup(date=day, messages=[message]))
    return groups


class ConversationStore:
    """Holds the ordered message collection of every thread.

    Collections are kept sorted by sort_key. Sorting is stable, so messages
    with equal keys stay in insertion order. Every applied mutation publishes
    a MESSAGES event carrying the thread's full sorted list.

    Args:
        notifier: Hub that receives change events.
    """

    def __init__(self, notifier: Optional[ChangeNotifier] = None) -> None:
        self.notifier = notifier or ChangeNotifier()
        self._messages: dict[str, list[Message]] = {}

    @property
    def thread_ids(self) -> list[str]:
        """Ids of threads that currently own a collection."""
        return list(self._messages.keys())

    @property
    def message_count(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def messages_for_thread(self, thread_id: str) -> list[Message]:
        """Get a thread's messages in display order.

        Args:
            thread_id: Thread to look up.

        Returns:
            Copy of the sorted message list (empty for an unknown thread).
        """
        return list(self._messages.get(thread_id, []))

    def get_message(self, thread_id: str, message_id: str) -> Optional[Message]:
        for message in self._messages.get(thread_id, []):
            if message.id == message_id:
                return message
        return None

    def last_message(self, thread_id: str) -> Optional[Message]:
        messages = self._messages.get(thread_id)
        return messages[-1] if messages else None

    def next_sort_key(self, thread_id: str, timestamp: datetime) -> int:
        """Sort key for a new message so that it sorts after the current tail.

        Args:
            thread_id: Thread receiving the message.
            timestamp: Message timestamp.

        Returns:
            max(timestamp in epoch milliseconds, last sort_key + 1).
        """
        key = int(timestamp.timestamp() * 1000)
        last = self.last_message(thread_id)
        if last is not None and last.sort_key >= key:
            key = last.sort_key + 1
        return key

    def append_message(self, thread_id: str, message: Message) -> bool:
        """Insert a message and restore sort order.

        Publishes a MESSAGES event followed by a SCROLL_TO event for the
        appended message.

        Args:
            thread_id: Owning thread.
            message: Message to insert.

        Returns:
            True if appended, False if a message with the same id exists.
        """
        messages = self._messages.setdefault(thread_id, [])
        if any(m.id == message.id for m in messages):
            logger.warning(
                f"Ignoring duplicate message {message.id} in thread {thread_id}"
            )
            return False

        # Build the new list and swap it in; readers never see a list mid-sort
        self._messages[thread_id] = sorted([*messages, message], key=lambda m: m.sort_key)

        self._publish(thread_id)
        self.notifier.publish_scroll_to(thread_id, message.id)
        return True

    def update_message(self, thread_id: str, message: Message) -> bool:
        """Replace the message with the same id.

        Args:
            thread_id: Owning thread.
            message: Replacement value.

        Returns:
            True if a message was replaced, False if none matched.
        """
        messages = self._messages.get(thread_id)
        if not messages:
            return False

        if not any(existing.id == message.id for existing in messages):
            return False

        self._messages[thread_id] = sorted(
            (message if existing.id == message.id else existing for existing in messages),
            key=lambda m: m.sort_key,
        )
        self._publish(thread_id)
        return True

    def remove_message(self, thread_id: str, message_id: str) -> bool:
        messages = self._messages.get(thread_id)
        if not messages:
            return False

        remaining = [m for m in messages if m.id != message_id]
        if len(remaining) == len(messages):
            return False

        self._messages[thread_id] = remaining
        self._publish(thread_id)
        return True

    def set_messages(self, thread_id: str, messages: Iterable[Message]) -> None:
        """Replace a thread's whole collection.

        Duplicate ids keep their first occurrence.

        Args:
            thread_id: Owning thread.
            messages: New contents in any order.
        """
        seen: set[str] = set()
        unique: list[Message] = []
        for message in messages:
            if message.id in seen:
                logger.warning(
                    f"Dropping duplicate message {message.id} in thread {thread_id}"
                )
                continue
            seen.add(message.id)
            unique.append(message)

        unique.sort(key=lambda m: m.sort_key)
        self._messages[thread_id] = unique
        self._publish(thread_id)

    def drop_thread(self, thread_id: str) -> bool:
        """Discard a thread's collection.

        Args:
            thread_id: Thread whose messages are discarded.

        Returns:
            True if a collection existed.
        """
        if thread_id not in self._messages:
            return False
        del self._messages[thread_id]
        self._publish(thread_id)
        return True

    def grouped_messages(
        self, thread_id: str, tz: Optional[tzinfo] = None
    ) -> list[MessageGroup]:
        return group_by_date(self._messages.get(thread_id, []), tz)

    def clear(self) -> None:
        """Remove every collection without publishing."""
        self._messages.clear()

    def validate(self) -> list[str]:
        """Check ordering and id uniqueness of every collection.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []
        for thread_id, messages in self._messages.items():
            keys = [m.sort_key for m in messages]
            if keys != sorted(keys):
                errors.append(f"Thread {thread_id}: messages out of sort_key order")
            ids = [m.id for m in messages]
            if len(ids) != len(set(ids)):
                errors.append(f"Thread {thread_id}: duplicate message ids")
        return errors

    def _publish(self, thread_id: str) -> None:
        self.notifier.publish_messages(thread_id, self.messages_for_thread(thread_id))
