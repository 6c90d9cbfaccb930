"""Fixtures for Message and Reaction."""

from datetime import datetime, timedelta

from models.message import DeliveryStatus, Message, Reaction
from tests.fixtures.core.times import FIXED_START


def create_message(
    sort_key: int = 1,
    timestamp: datetime | None = None,
    body_text: str | None = "Hello",
    is_outgoing: bool = False,
    delivery_status: DeliveryStatus = DeliveryStatus.SENT,
    author_id: str = "alice",
    author_display_name: str | None = "Alice Johnson",
    **kwargs,
) -> Message:
    """Create a Message with sensible defaults.

    Args:
        sort_key: Ordering key (default: 1).
        timestamp: Message time (defaults to FIXED_START).
        body_text: Message text (default: "Hello").
        is_outgoing: Whether the local user sent it (default: False).
        delivery_status: Delivery status (default: SENT).
        author_id: Author identifier (default: "alice").
        author_display_name: Author name (default: "Alice Johnson").
        **kwargs: Additional fields (id, has_image, reactions, ...).

    Returns:
        Message instance ready for testing.
    """
    return Message(
        sort_key=sort_key,
        timestamp=timestamp or FIXED_START,
        body_text=body_text,
        is_outgoing=is_outgoing,
        delivery_status=delivery_status,
        author_id=author_id,
        author_display_name=author_display_name,
        **kwargs,
    )


def create_outgoing_message(sort_key: int = 1, body_text: str = "On my way", **kwargs) -> Message:
    return create_message(
        sort_key=sort_key,
        body_text=body_text,
        is_outgoing=True,
        delivery_status=kwargs.pop("delivery_status", DeliveryStatus.SENDING),
        author_id="me",
        author_display_name="Me",
        **kwargs,
    )


def create_conversation(count: int = 3, start: datetime | None = None) -> list[Message]:
    """Alternating incoming/outgoing messages one minute apart."""
    start = start or FIXED_START
    return [
        create_message(
            sort_key=i + 1,
            timestamp=start + timedelta(minutes=i),
            body_text=f"Message {i + 1}",
            is_outgoing=i % 2 == 1,
            author_id="me" if i % 2 == 1 else "alice",
        )
        for i in range(count)
    ]


def create_reaction(
    emoji: str = "👍",
    reactor_id: str = "alice",
    reactor_display_name: str | None = "Alice",
) -> Reaction:
    return Reaction(
        emoji=emoji,
        reactor_id=reactor_id,
        reactor_display_name=reactor_display_name,
    )
