"""Unit tests for MessagingEnvironment."""

import pytest
from pydantic import ValidationError

from models.conversation_store import ConversationStore
from models.environment import MessagingEnvironment
from models.notifications import ChangeNotifier
from models.reactions import ReactionLedger
from models.thread_store import ThreadStore
from tests.fixtures.core.environments import create_environment
from tests.fixtures.core.messages import create_conversation
from tests.fixtures.core.threads import create_thread
from tests.fixtures.core.times import FIXED_START, create_simulation_clock


class TestCreate:
    """Tests for MessagingEnvironment.create()."""

    def test_stores_share_notifier(self, environment):
        assert environment.conversations.notifier is environment.notifier
        assert environment.threads.notifier is environment.notifier
        assert environment.threads.conversations is environment.conversations
        assert environment.reactions.conversations is environment.conversations

    def test_clock_starts_at_given_time(self, environment):
        assert environment.now == FIXED_START

    def test_user_id_propagates(self):
        environment = create_environment(user_id="u-1")

        assert environment.user_id == "u-1"
        assert environment.threads.user_id == "u-1"

    def test_mismatched_notifier_rejected(self):
        conversations = ConversationStore(ChangeNotifier())
        with pytest.raises(ValidationError):
            MessagingEnvironment(
                notifier=ChangeNotifier(),
                conversations=conversations,
                threads=ThreadStore(conversations),
                reactions=ReactionLedger(conversations),
                clock=create_simulation_clock(),
            )


class TestSnapshotAndValidation:
    """Tests for get_snapshot(), validate() and clear()."""

    def test_snapshot(self, environment):
        thread = environment.threads.add_thread(create_thread())
        environment.conversations.set_messages(thread.id, create_conversation(2))

        snapshot = environment.get_snapshot()

        assert snapshot["time"]["current_time"] == FIXED_START.isoformat()
        assert [t["id"] for t in snapshot["threads"]] == [thread.id]
        assert len(snapshot["messages"][thread.id]) == 2

    def test_valid_environment(self, environment):
        thread = environment.threads.add_thread(create_thread())
        environment.conversations.set_messages(thread.id, create_conversation(2))

        assert environment.validate() == []

    def test_orphan_messages_reported(self, environment):
        environment.conversations.set_messages("ghost", create_conversation(1))

        errors = environment.validate()

        assert len(errors) == 1
        assert "ghost" in errors[0]

    def test_clear(self, environment):
        thread = environment.threads.add_thread(create_thread())
        environment.conversations.set_messages(thread.id, create_conversation(2))

        environment.clear()

        assert environment.threads.thread_count == 0
        assert environment.conversations.message_count == 0
