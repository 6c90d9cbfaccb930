"""Thread, snippet and list-level status models for the chat list."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field

from models.protocols import ThreadRecord


class MessageStatus(str, Enum):
    """Display-oriented status of a thread's last outgoing message.

    This is the chat-list projection of DeliveryStatus and is coarser than it:
    uploading/sending spin, sent/skipped show one check, delivered shows a
    circled check and read/viewed a filled one.
    """

    UPLOADING = "uploading"
    SENDING = "sending"
    SENT = "sent"
    SKIPPED = "skipped"
    DELIVERED = "delivered"
    READ = "read"
    VIEWED = "viewed"
    FAILED = "failed"
    PENDING = "pending"

    @property
    def icon_name(self) -> str:
        """SF Symbol name for the status icon."""
        return _STATUS_ICONS[self]

    @property
    def is_failure(self) -> bool:
        """Whether this status indicates a failure."""
        return self is MessageStatus.FAILED

    @property
    def should_animate(self) -> bool:
        """Whether the status icon should spin."""
        return self in (MessageStatus.UPLOADING, MessageStatus.SENDING)


_STATUS_ICONS = {
    MessageStatus.UPLOADING: "arrow.clockwise",
    MessageStatus.SENDING: "arrow.clockwise",
    MessageStatus.SENT: "checkmark",
    MessageStatus.SKIPPED: "checkmark",
    MessageStatus.DELIVERED: "checkmark.circle",
    MessageStatus.READ: "checkmark.circle.fill",
    MessageStatus.VIEWED: "checkmark.circle.fill",
    MessageStatus.FAILED: "exclamationmark.circle",
    MessageStatus.PENDING: "exclamationmark.circle",
}


class FilterMode(str, Enum):
    """Filter applied to the chat list."""

    NONE = "none"
    UNREAD = "unread"


# Snippet variants


class BlockedSnippet(BaseModel):
    """Thread is blocked."""

    kind: Literal["blocked"] = "blocked"

    class Config:
        frozen = True

    @property
    def text(self) -> str:
        return ""


class PendingRequestSnippet(BaseModel):
    """Pending message request, optionally naming who added the user."""

    kind: Literal["pending_request"] = "pending_request"
    inviter_name: Optional[str] = None

    class Config:
        frozen = True

    @property
    def text(self) -> str:
        return ""


class DraftSnippet(BaseModel):
    """Unsent draft text."""

    kind: Literal["draft"] = "draft"
    draft_text: str

    class Config:
        frozen = True

    @property
    def text(self) -> str:
        return self.draft_text


class VoiceDraftSnippet(BaseModel):
    """Unsent voice memo."""

    kind: Literal["voice_draft"] = "voice_draft"

    class Config:
        frozen = True

    @property
    def text(self) -> str:
        return ""


class DirectMessageSnippet(BaseModel):
    """Last message of a 1:1 thread (or an outgoing group message)."""

    kind: Literal["message"] = "message"
    message_text: str

    class Config:
        frozen = True

    @property
    def text(self) -> str:
        return self.message_text


class GroupMessageSnippet(BaseModel):
    """Last incoming message of a group thread with its sender's name."""

    kind: Literal["group_message"] = "group_message"
    message_text: str
    sender_name: str

    class Config:
        frozen = True

    @property
    def text(self) -> str:
        return self.message_text


class NoSnippet(BaseModel):
    """Nothing to preview."""

    kind: Literal["none"] = "none"

    class Config:
        frozen = True

    @property
    def text(self) -> str:
        return ""


Snippet = Annotated[
    Union[
        BlockedSnippet,
        PendingRequestSnippet,
        DraftSnippet,
        VoiceDraftSnippet,
        DirectMessageSnippet,
        GroupMessageSnippet,
        NoSnippet,
    ],
    Field(discriminator="kind"),
]


class GroupMember(BaseModel):
    """A member of a group thread.

    Args:
        id: Member identifier (the local user is the configured user_id).
        name: Display name.
        is_admin: Whether the member administers the group.
    """

    id: str
    name: str
    is_admin: bool = False

    class Config:
        frozen = True

    @property
    def first_name(self) -> str:
        """First word of the display name, used in group snippets."""
        parts = self.name.split(" ")
        return parts[0] if parts[0] else self.name

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "is_admin": self.is_admin}


class Thread(BaseModel):
    """A conversation identity and its chat-list projection.

    Threads are immutable; ThreadStore replaces the record at its index
    with a model_copy() whenever a field changes.

    Args:
        id: Unique thread identifier (UUID).
        display_name: Contact or group name.
        is_group: Whether this is a group thread.
        is_pinned: Whether the thread is pinned.
        is_muted: Whether notifications are muted.
        has_unread_messages: Whether the thread shows as unread.
        unread_count: Unread count; 0 while unread means "unknown".
        last_message_date: Date of the last message.
        last_message_snippet: Preview of the last message.
        last_message_status: Status of the last outgoing message.
        is_typing: Whether someone is typing.
        is_blocked: Whether the thread is blocked.
        has_pending_request: Whether a message request is pending.
        is_note_to_self: Whether this is the note-to-self thread.
        member_count: Number of members (0 for 1:1).
        participant_names: Display names of the other group members.
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique thread identifier",
    )
    display_name: str = Field(description="Contact or group name")
    is_group: bool = False
    is_pinned: bool = False
    is_muted: bool = False
    has_unread_messages: bool = False
    unread_count: int = Field(default=0, ge=0)
    last_message_date: Optional[datetime] = None
    last_message_snippet: Optional[Snippet] = None
    last_message_status: Optional[MessageStatus] = None
    is_typing: bool = False
    is_blocked: bool = False
    has_pending_request: bool = False
    is_note_to_self: bool = False
    member_count: int = Field(default=0, ge=0)
    participant_names: tuple[str, ...] = ()

    class Config:
        frozen = True

    @classmethod
    def from_record(cls, record: ThreadRecord) -> "Thread":
        """Adapt any object exposing the ThreadRecord attributes.

        Snippet and status are optional on backends and are copied when
        present.

        Args:
            record: Backend thread object satisfying ThreadRecord.

        Returns:
            Thread value carrying the record's fields.
        """
        if isinstance(record, Thread):
            return record
        return cls(
            id=record.id,
            display_name=record.display_name,
            is_group=record.is_group,
            is_pinned=record.is_pinned,
            is_muted=record.is_muted,
            has_unread_messages=record.has_unread_messages,
            unread_count=record.unread_count,
            last_message_date=record.last_message_date,
            last_message_snippet=getattr(record, "last_message_snippet", None),
            last_message_status=getattr(record, "last_message_status", None),
            is_typing=record.is_typing,
            is_blocked=record.is_blocked,
            has_pending_request=record.has_pending_request,
            is_note_to_self=record.is_note_to_self,
            member_count=record.member_count,
            participant_names=tuple(record.participant_names),
        )

    def with_updates(self, **changes: Any) -> "Thread":
        """Return a copy with the given fields replaced.

        Args:
            **changes: Field values to replace.

        Returns:
            Replacement thread with the same id.
        """
        if "id" in changes and changes["id"] != self.id:
            raise ValueError("Thread id cannot change")
        return self.model_copy(update=changes)

    def to_dict(self) -> dict[str, Any]:
        """Convert thread to dictionary for API responses.

        Returns:
            Dictionary representation of this thread.
        """
        return self.model_dump(mode="json")
