"""Capability interfaces for backend thread and message objects.

Backends (a roster service, an XMPP adapter, a test double) expose their
own objects. Anything that provides these read-only attributes can be turned
into the engine's immutable records with Thread.from_record() and
Message.from_record(); the stores never depend on a backend type.
"""

from datetime import datetime
from typing import Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class ReactionRecord(Protocol):
    """Read-only view of a reaction."""

    id: str
    emoji: str
    reactor_id: str
    reactor_display_name: Optional[str]


@runtime_checkable
class MessageRecord(Protocol):
    """Read-only view of a message as rendered in a conversation."""

    id: str
    sort_key: int
    timestamp: datetime
    body_text: Optional[str]
    has_image: bool
    is_outgoing: bool
    delivery_status: str
    author_id: str
    author_display_name: Optional[str]
    reactions: Sequence[ReactionRecord]
    is_system_message: bool


@runtime_checkable
class ThreadRecord(Protocol):
    """Read-only view of a thread as rendered in the chat list."""

    id: str
    display_name: str
    is_group: bool
    is_pinned: bool
    is_muted: bool
    has_unread_messages: bool
    unread_count: int
    last_message_date: Optional[datetime]
    is_typing: bool
    is_blocked: bool
    has_pending_request: bool
    is_note_to_self: bool
    member_count: int
    participant_names: Sequence[str]
