"""Message, reaction and delivery status models for conversations."""

from datetime import date as CalendarDate
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from models.protocols import MessageRecord


class DeliveryStatus(str, Enum):
    """Delivery status of an outgoing message.

    The simulated send path moves through SENDING -> DELIVERED -> READ.
    SENT is an acknowledged-but-not-delivered state used by seed data, and
    FAILED is terminal (the reason lives on Message.failure_reason).
    """

    SENDING = "sending"
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"

    @property
    def icon_name(self) -> str:
        """SF Symbol name shown next to an outgoing bubble."""
        return _DELIVERY_ICONS[self]

    @property
    def is_failure(self) -> bool:
        """Whether this status indicates a failed send."""
        return self is DeliveryStatus.FAILED


_DELIVERY_ICONS = {
    DeliveryStatus.SENDING: "circle.dotted",
    DeliveryStatus.SENT: "checkmark",
    DeliveryStatus.DELIVERED: "checkmark.circle",
    DeliveryStatus.READ: "checkmark.circle.fill",
    DeliveryStatus.FAILED: "exclamationmark.circle",
}


class Reaction(BaseModel):
    """An emoji reaction attached to a message.

    Args:
        id: Unique reaction identifier (UUID).
        emoji: Emoji character(s) used for the reaction.
        reactor_id: Identifier of the person who reacted.
        reactor_display_name: Resolved display name of the reactor.
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique reaction identifier",
    )
    emoji: str = Field(description="Emoji character(s) used for reaction")
    reactor_id: str = Field(description="Identifier of the person who reacted")
    reactor_display_name: Optional[str] = Field(
        default=None,
        description="Display name of the person who reacted",
    )

    class Config:
        frozen = True

    def to_dict(self) -> dict[str, Any]:
        """Convert reaction to dictionary.

        Returns:
            Dictionary representation of this reaction.
        """
        result = {
            "id": self.id,
            "emoji": self.emoji,
            "reactor_id": self.reactor_id,
        }
        if self.reactor_display_name:
            result["reactor_display_name"] = self.reactor_display_name
        return result


class Message(BaseModel):
    """A single unit of conversation content.

    Messages are immutable. Every change (delivery status, reactions) produces
    a replacement value via model_copy(), which the ConversationStore writes
    back by id.

    Args:
        id: Unique message identifier (UUID).
        sort_key: Primary ordering key within a thread (ascending).
        timestamp: When the message was sent or received (simulator time).
        body_text: Message text, None for media-only messages.
        has_image: Whether the message carries an image.
        is_outgoing: Whether the local user sent this message.
        delivery_status: Delivery status, meaningful for outgoing messages.
        failure_reason: Reason attached to a FAILED delivery status.
        author_id: Identifier of the author.
        author_display_name: Resolved author display name.
        reactions: Reactions in insertion order.
        is_system_message: Whether this is a system notice ("Alice added Bob").
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique message identifier",
    )
    sort_key: int = Field(ge=0, description="Primary ordering key within a thread")
    timestamp: datetime = Field(description="When the message was sent or received")
    body_text: Optional[str] = Field(default=None, description="Message text")
    has_image: bool = Field(default=False, description="Whether the message has an image")
    is_outgoing: bool = Field(description="Whether the local user sent this message")
    delivery_status: DeliveryStatus = Field(
        default=DeliveryStatus.SENT,
        description="Delivery status for outgoing messages",
    )
    failure_reason: Optional[str] = Field(
        default=None,
        description="Reason attached to a failed delivery",
    )
    author_id: str = Field(description="Identifier of the author")
    author_display_name: Optional[str] = Field(
        default=None,
        description="Resolved author display name",
    )
    reactions: tuple[Reaction, ...] = Field(
        default=(),
        description="Reactions in insertion order",
    )
    is_system_message: bool = Field(
        default=False,
        description="Whether this is a system message",
    )

    class Config:
        frozen = True

    @field_validator("timestamp")
    @classmethod
    def validate_timezone_aware(cls, v: datetime) -> datetime:
        """Ensure timestamp is timezone-aware."""
        if v.tzinfo is None:
            raise ValueError("Message timestamp must be timezone-aware")
        return v

    @classmethod
    def from_record(cls, record: MessageRecord) -> "Message":
        """Adapt any object exposing the MessageRecord attributes.

        Args:
            record: Backend message object satisfying MessageRecord.

        Returns:
            Message value carrying the record's fields.
        """
        if isinstance(record, Message):
            return record
        return cls(
            id=record.id,
            sort_key=record.sort_key,
            timestamp=record.timestamp,
            body_text=record.body_text,
            has_image=record.has_image,
            is_outgoing=record.is_outgoing,
            delivery_status=DeliveryStatus(record.delivery_status),
            author_id=record.author_id,
            author_display_name=record.author_display_name,
            reactions=tuple(
                Reaction(
                    id=r.id,
                    emoji=r.emoji,
                    reactor_id=r.reactor_id,
                    reactor_display_name=r.reactor_display_name,
                )
                for r in record.reactions
            ),
            is_system_message=record.is_system_message,
        )

    @property
    def preview_text(self) -> str:
        """Text used for thread snippets ("Photo" for image-only messages)."""
        if self.body_text:
            return self.body_text
        return "Photo" if self.has_image else ""

    def with_status(
        self, status: DeliveryStatus, reason: Optional[str] = None
    ) -> "Message":
        """Return a copy with a new delivery status.

        Args:
            status: New delivery status.
            reason: Failure reason, only kept when status is FAILED.

        Returns:
            Replacement message with identical id, sort_key and timestamp.
        """
        return self.model_copy(
            update={
                "delivery_status": status,
                "failure_reason": reason if status is DeliveryStatus.FAILED else None,
            }
        )

    def with_reactions(self, reactions: list[Reaction]) -> "Message":
        """Return a copy carrying the given reactions.

        Args:
            reactions: Full replacement reaction list.

        Returns:
            Replacement message.
        """
        return self.model_copy(update={"reactions": tuple(reactions)})

    def to_dict(self) -> dict[str, Any]:
        """Convert message to dictionary for API responses.

        Returns:
            Dictionary representation of this message.
        """
        result = {
            "id": self.id,
            "sort_key": self.sort_key,
            "timestamp": self.timestamp.isoformat(),
            "body_text": self.body_text,
            "has_image": self.has_image,
            "is_outgoing": self.is_outgoing,
            "delivery_status": self.delivery_status.value,
            "author_id": self.author_id,
            "reactions": [r.to_dict() for r in self.reactions],
            "is_system_message": self.is_system_message,
        }
        if self.author_display_name:
            result["author_display_name"] = self.author_display_name
        if self.failure_reason:
            result["failure_reason"] = self.failure_reason
        return result


class MessageGroup(BaseModel):
    """A contiguous run of messages sharing one calendar day.

    Args:
        date: The local calendar day of every message in the run.
        messages: Messages in display order.
    """

    date: CalendarDate
    messages: list[Message] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert group to dictionary for API responses."""
        return {
            "date": self.date.isoformat(),
            "messages": [m.to_dict() for m in self.messages],
        }
