"""Unit tests for Message, Reaction, DeliveryStatus and MessageGroup."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import pytest
from pydantic import ValidationError

from models.message import DeliveryStatus, Message, MessageGroup, Reaction
from tests.fixtures.core.messages import create_message, create_reaction
from tests.fixtures.core.times import FIXED_START


@dataclass
class BackendReaction:
    id: str
    emoji: str
    reactor_id: str
    reactor_display_name: Optional[str] = None


@dataclass
class BackendMessage:
    id: str
    sort_key: int
    timestamp: datetime
    body_text: Optional[str]
    has_image: bool
    is_outgoing: bool
    delivery_status: str
    author_id: str
    author_display_name: Optional[str]
    reactions: list = field(default_factory=list)
    is_system_message: bool = False


class TestDeliveryStatus:
    """Tests for the DeliveryStatus enum."""

    def test_values(self):
        assert [s.value for s in DeliveryStatus] == [
            "sending",
            "sent",
            "delivered",
            "read",
            "failed",
        ]

    def test_only_failed_is_failure(self):
        assert DeliveryStatus.FAILED.is_failure
        assert not any(s.is_failure for s in DeliveryStatus if s is not DeliveryStatus.FAILED)

    def test_every_status_has_icon(self):
        for status in DeliveryStatus:
            assert status.icon_name


class TestMessageInstantiation:
    """Tests for creating messages."""

    def test_defaults(self):
        message = create_message()

        assert message.id
        assert message.has_image is False
        assert message.delivery_status == DeliveryStatus.SENT
        assert message.failure_reason is None
        assert message.reactions == ()
        assert message.is_system_message is False

    def test_ids_are_unique(self):
        assert create_message().id != create_message().id

    def test_naive_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            create_message(timestamp=datetime(2025, 1, 15, 12, 0))

    def test_negative_sort_key_rejected(self):
        with pytest.raises(ValidationError):
            create_message(sort_key=-1)

    def test_is_frozen(self):
        message = create_message()
        with pytest.raises(ValidationError):
            message.body_text = "changed"


class TestMessageCopies:
    """Tests for with_status() and with_reactions()."""

    def test_with_status_keeps_identity_fields(self):
        message = create_message(is_outgoing=True, delivery_status=DeliveryStatus.SENDING)

        updated = message.with_status(DeliveryStatus.DELIVERED)

        assert updated.delivery_status == DeliveryStatus.DELIVERED
        assert updated.id == message.id
        assert updated.sort_key == message.sort_key
        assert updated.timestamp == message.timestamp
        assert message.delivery_status == DeliveryStatus.SENDING

    def test_failure_reason_kept_only_for_failed(self):
        message = create_message(is_outgoing=True)

        failed = message.with_status(DeliveryStatus.FAILED, "Network down")
        delivered = message.with_status(DeliveryStatus.DELIVERED, "ignored")

        assert failed.failure_reason == "Network down"
        assert delivered.failure_reason is None

    def test_with_reactions_replaces_list(self):
        message = create_message(reactions=(create_reaction("👍"),))

        updated = message.with_reactions([create_reaction("❤️")])

        assert [r.emoji for r in updated.reactions] == ["❤️"]
        assert [r.emoji for r in message.reactions] == ["👍"]


class TestPreviewText:
    """Tests for the snippet preview text."""

    def test_uses_body_text(self):
        assert create_message(body_text="Hi there").preview_text == "Hi there"

    def test_image_only_message(self):
        assert create_message(body_text=None, has_image=True).preview_text == "Photo"

    def test_empty_message(self):
        assert create_message(body_text=None).preview_text == ""


class TestFromRecord:
    """Tests for adapting backend objects."""

    def test_adapts_backend_object(self):
        record = BackendMessage(
            id="m-1",
            sort_key=7,
            timestamp=FIXED_START,
            body_text="From the backend",
            has_image=False,
            is_outgoing=True,
            delivery_status="delivered",
            author_id="me",
            author_display_name="Me",
            reactions=[BackendReaction(id="r-1", emoji="🎉", reactor_id="bob")],
        )

        message = Message.from_record(record)

        assert message.id == "m-1"
        assert message.sort_key == 7
        assert message.delivery_status == DeliveryStatus.DELIVERED
        assert message.reactions[0].id == "r-1"
        assert message.reactions[0].emoji == "🎉"

    def test_message_passes_through(self):
        message = create_message()
        assert Message.from_record(message) is message


class TestSerialization:
    """Tests for to_dict() and JSON round trips."""

    def test_to_dict(self):
        message = create_message(reactions=(create_reaction(),))

        data = message.to_dict()

        assert data["id"] == message.id
        assert data["timestamp"] == FIXED_START.isoformat()
        assert data["delivery_status"] == "sent"
        assert data["author_display_name"] == "Alice Johnson"
        assert data["reactions"][0]["emoji"] == "👍"
        assert "failure_reason" not in data

    def test_json_round_trip(self):
        message = create_message(reactions=(create_reaction(),))

        restored = Message.model_validate(message.model_dump(mode="json"))

        assert restored == message

    def test_reaction_to_dict_omits_missing_name(self):
        reaction = Reaction(emoji="👍", reactor_id="bob")
        assert "reactor_display_name" not in reaction.to_dict()


class TestMessageGroup:
    """Tests for MessageGroup."""

    def test_to_dict(self):
        message = create_message(timestamp=datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc))
        group = MessageGroup(date=message.timestamp.date(), messages=[message])

        data = group.to_dict()

        assert data["date"] == "2025-03-01"
        assert data["messages"][0]["id"] == message.id
