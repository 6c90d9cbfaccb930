"""Unit tests for ThreadStore."""

import pytest

from models.conversation_store import ConversationStore
from models.notifications import ChangeKind, ChangeNotifier
from models.thread import (
    DirectMessageSnippet,
    FilterMode,
    GroupMessageSnippet,
    MessageStatus,
)
from models.thread_store import ThreadStore
from tests.fixtures.core.messages import (
    create_conversation,
    create_message,
    create_outgoing_message,
)
from tests.fixtures.core.threads import create_group_thread, create_thread


def create_store() -> tuple[ThreadStore, list]:
    """A thread store plus the list of events published by it and its conversations."""
    notifier = ChangeNotifier()
    events = []
    notifier.subscribe(events.append)
    return ThreadStore(ConversationStore(notifier), notifier), events


class TestQueries:
    """Tests for listing and lookup."""

    def test_list_keeps_insertion_order(self):
        store, _ = create_store()
        names = ["Zed", "Alice", "Mike"]
        for name in names:
            store.add_thread(create_thread(name))

        assert [t.display_name for t in store.list_threads()] == names

    def test_unread_filter(self):
        store, _ = create_store()
        store.add_thread(create_thread("Alice", has_unread_messages=True, unread_count=2))
        store.add_thread(create_thread("Bob"))

        unread = store.list_threads(FilterMode.UNREAD)

        assert [t.display_name for t in unread] == ["Alice"]

    def test_search_is_case_insensitive_substring(self):
        store, _ = create_store()
        store.add_thread(create_thread("Book Club 📚"))
        store.add_thread(create_thread("Bob Smith"))

        assert [t.display_name for t in store.list_threads(search_text="CLUB")] == ["Book Club 📚"]
        assert len(store.list_threads(search_text="bo")) == 2

    @pytest.mark.parametrize("search", [None, "", "   "])
    def test_blank_search_matches_everything(self, search):
        store, _ = create_store()
        store.add_thread(create_thread("Alice"))
        store.add_thread(create_thread("Bob"))

        assert len(store.list_threads(search_text=search)) == 2

    def test_filter_and_search_combine(self):
        store, _ = create_store()
        store.add_thread(create_thread("Alice", has_unread_messages=True))
        store.add_thread(create_thread("Alicia"))

        result = store.list_threads(FilterMode.UNREAD, "ali")

        assert [t.display_name for t in result] == ["Alice"]

    def test_members_and_participants(self):
        store, _ = create_store()
        thread, members = create_group_thread()
        store.add_thread(thread, members=members)

        assert store.members_for_thread(thread.id) == members
        assert store.participant_names_for_thread(thread.id) == ["Alice Johnson", "Bob Smith"]
        assert store.is_group_thread(thread.id)

    def test_direct_thread_has_no_members(self):
        store, _ = create_store()
        thread = store.add_thread(create_thread())

        assert store.members_for_thread(thread.id) == []
        assert store.is_group_thread(thread.id) is False
        assert store.is_group_thread("missing") is False


class TestAddAndRemove:
    """Tests for add_thread(), archive_thread() and delete_thread()."""

    def test_add_publishes_full_list(self):
        store, events = create_store()
        thread = create_thread()

        store.add_thread(thread)

        assert events[-1].kind == ChangeKind.THREADS
        assert events[-1].threads == [thread]

    def test_duplicate_id_rejected(self):
        store, _ = create_store()
        thread = store.add_thread(create_thread())

        with pytest.raises(ValueError):
            store.add_thread(thread)

    @pytest.mark.parametrize("action", ["archive_thread", "delete_thread"])
    def test_removal_discards_messages_and_members(self, action):
        store, events = create_store()
        thread, members = create_group_thread()
        store.add_thread(thread, members=members)
        store.conversations.set_messages(thread.id, create_conversation(3))
        events.clear()

        assert getattr(store, action)(thread.id) is True

        assert store.get_thread(thread.id) is None
        assert store.members_for_thread(thread.id) == []
        assert store.conversations.messages_for_thread(thread.id) == []
        assert [e.kind for e in events] == [ChangeKind.MESSAGES, ChangeKind.THREADS]
        assert events[-1].threads == []

    @pytest.mark.parametrize("action", ["archive_thread", "delete_thread"])
    def test_removing_unknown_thread(self, action):
        store, events = create_store()

        assert getattr(store, action)("missing") is False
        assert events == []

    def test_removal_keeps_order_of_remaining(self):
        store, _ = create_store()
        threads = [store.add_thread(create_thread(n)) for n in ("A", "B", "C")]

        store.archive_thread(threads[1].id)

        assert [t.display_name for t in store.list_threads()] == ["A", "C"]


class TestToggles:
    """Tests for mute/read toggles and mark_as_read()."""

    def test_toggle_mute(self):
        store, _ = create_store()
        thread = store.add_thread(create_thread())

        assert store.toggle_mute(thread.id).is_muted is True
        assert store.toggle_mute(thread.id).is_muted is False

    def test_toggle_read_sets_count(self):
        store, _ = create_store()
        thread = store.add_thread(create_thread())

        unread = store.toggle_read(thread.id)
        assert unread.has_unread_messages is True
        assert unread.unread_count == 1

        read = store.toggle_read(thread.id)
        assert read.has_unread_messages is False
        assert read.unread_count == 0

    def test_toggle_unknown_thread(self):
        store, _ = create_store()

        assert store.toggle_mute("missing") is None
        assert store.toggle_read("missing") is None

    def test_mark_as_read(self):
        store, _ = create_store()
        thread = store.add_thread(create_thread(has_unread_messages=True, unread_count=4))

        updated = store.mark_as_read(thread.id)

        assert updated.has_unread_messages is False
        assert updated.unread_count == 0

    def test_mark_as_read_on_read_thread_is_silent(self):
        store, events = create_store()
        thread = store.add_thread(create_thread())
        events.clear()

        assert store.mark_as_read(thread.id) is None
        assert events == []

    def test_toggle_keeps_position(self):
        store, _ = create_store()
        threads = [store.add_thread(create_thread(n)) for n in ("A", "B", "C")]

        store.toggle_mute(threads[1].id)

        assert [t.id for t in store.list_threads()] == [t.id for t in threads]

    def test_set_typing_only_publishes_changes(self):
        store, events = create_store()
        thread = store.add_thread(create_thread())
        events.clear()

        assert store.set_typing(thread.id, True).is_typing is True
        assert store.set_typing(thread.id, True) is None
        assert len(events) == 1


class TestProjections:
    """Tests for last-message projections."""

    def test_record_outgoing_message(self):
        store, _ = create_store()
        thread = store.add_thread(create_thread())
        message = create_outgoing_message(body_text="On my way")

        updated = store.record_last_message(thread.id, message, status=MessageStatus.SENDING)

        assert updated.last_message_snippet == DirectMessageSnippet(message_text="On my way")
        assert updated.last_message_date == message.timestamp
        assert updated.last_message_status == MessageStatus.SENDING

    def test_incoming_message_has_no_status(self):
        store, _ = create_store()
        thread = store.add_thread(create_thread())

        updated = store.record_last_message(
            thread.id, create_message(), status=MessageStatus.DELIVERED
        )

        assert updated.last_message_status is None

    def test_incoming_group_message_names_sender(self):
        store, _ = create_store()
        thread, members = create_group_thread()
        store.add_thread(thread, members=members)

        updated = store.record_last_message(
            thread.id, create_message(body_text="Hi all", author_display_name="Alice Johnson")
        )

        assert updated.last_message_snippet == GroupMessageSnippet(
            message_text="Hi all", sender_name="Alice"
        )

    def test_outgoing_group_message_uses_direct_snippet(self):
        store, _ = create_store()
        thread, members = create_group_thread()
        store.add_thread(thread, members=members)

        updated = store.record_last_message(thread.id, create_outgoing_message())

        assert isinstance(updated.last_message_snippet, DirectMessageSnippet)

    def test_record_incoming(self):
        store, events = create_store()
        thread = store.add_thread(
            create_thread(is_typing=True, has_unread_messages=True, unread_count=2)
        )
        events.clear()

        updated = store.record_incoming(thread.id, create_message(body_text="New!"))

        assert updated.unread_count == 3
        assert updated.has_unread_messages is True
        assert updated.is_typing is False
        assert updated.last_message_snippet.text == "New!"
        assert len(events) == 1

    def test_set_last_message_status(self):
        store, events = create_store()
        thread = store.add_thread(create_thread(last_message_status=MessageStatus.SENDING))
        events.clear()

        assert (
            store.set_last_message_status(thread.id, MessageStatus.DELIVERED).last_message_status
            == MessageStatus.DELIVERED
        )
        assert store.set_last_message_status(thread.id, MessageStatus.DELIVERED) is None
        assert len(events) == 1

    def test_projection_of_unknown_thread(self):
        store, _ = create_store()

        assert store.record_last_message("missing", create_message()) is None
        assert store.record_incoming("missing", create_message()) is None


class TestValidation:
    """Tests for clear() and validate()."""

    def test_validate_clean_store(self):
        store, _ = create_store()
        thread, members = create_group_thread()
        store.add_thread(thread, members=members)

        assert store.validate() == []

    def test_note_to_self_group_flagged(self):
        store, _ = create_store()
        store.add_thread(create_thread(is_group=True, is_note_to_self=True))

        assert len(store.validate()) == 1

    def test_clear(self):
        store, events = create_store()
        store.add_thread(create_thread())
        events.clear()

        store.clear()

        assert store.thread_count == 0
        assert events == []
