"""Unit tests for ChangeNotifier and Subscription."""

import pytest

from models.notifications import ChangeEvent, ChangeKind, ChangeNotifier
from tests.fixtures.core.messages import create_message
from tests.fixtures.core.threads import create_thread


class TestPublish:
    """Tests for publication order and sequencing."""

    def test_sequence_increments(self):
        notifier = ChangeNotifier()
        received = []
        notifier.subscribe(received.append)

        notifier.publish_threads([])
        notifier.publish_messages("t", [])
        notifier.publish_scroll_to("t", "m")

        assert [e.sequence for e in received] == [1, 2, 3]
        assert notifier.sequence == 3

    def test_payloads(self):
        notifier = ChangeNotifier()
        thread = create_thread()
        message = create_message()

        threads_event = notifier.publish_threads([thread])
        messages_event = notifier.publish_messages(thread.id, [message])
        scroll_event = notifier.publish_scroll_to(thread.id, message.id)

        assert threads_event.kind == ChangeKind.THREADS
        assert threads_event.threads == [thread]
        assert messages_event.thread_id == thread.id
        assert messages_event.messages == [message]
        assert scroll_event.message_id == message.id

    def test_publish_without_subscribers(self):
        notifier = ChangeNotifier()
        event = notifier.publish(ChangeEvent(kind=ChangeKind.THREADS))
        assert event.sequence == 1


class TestSubscriptions:
    """Tests for filtering and unsubscribing."""

    def test_kind_filter(self):
        notifier = ChangeNotifier()
        received = []
        notifier.subscribe(received.append, kind=ChangeKind.MESSAGES)

        notifier.publish_threads([])
        notifier.publish_messages("t", [])

        assert [e.kind for e in received] == [ChangeKind.MESSAGES]

    def test_thread_filter_excludes_thread_list_events(self):
        notifier = ChangeNotifier()
        received = []
        notifier.subscribe(received.append, thread_id="a")

        notifier.publish_threads([])
        notifier.publish_messages("a", [])
        notifier.publish_messages("b", [])
        notifier.publish_scroll_to("a", "m")

        assert [(e.kind, e.thread_id) for e in received] == [
            (ChangeKind.MESSAGES, "a"),
            (ChangeKind.SCROLL_TO, "a"),
        ]

    def test_unsubscribe(self):
        notifier = ChangeNotifier()
        received = []
        subscription = notifier.subscribe(received.append)

        subscription.unsubscribe()
        subscription.unsubscribe()
        notifier.publish_threads([])

        assert received == []
        assert subscription.is_active is False
        assert notifier.subscriber_count == 0

    def test_unsubscribe_during_delivery(self):
        notifier = ChangeNotifier()
        received = []

        def once(event):
            received.append(event)
            subscription.unsubscribe()

        subscription = notifier.subscribe(once)
        notifier.publish_threads([])
        notifier.publish_threads([])

        assert len(received) == 1

    def test_publish_during_delivery(self):
        notifier = ChangeNotifier()
        received = []

        def follow_up(event):
            received.append(event.sequence)
            if event.kind == ChangeKind.MESSAGES:
                notifier.publish_scroll_to(event.thread_id, "m1")

        notifier.subscribe(follow_up)
        notifier.publish_messages("t", [])

        assert received == [1, 2]

    def test_failing_subscriber_does_not_block_others(self, caplog):
        notifier = ChangeNotifier()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        notifier.subscribe(broken)
        notifier.subscribe(received.append)

        notifier.publish_threads([])

        assert len(received) == 1
        assert "boom" in caplog.text

    @pytest.mark.parametrize(
        "kind, thread_id, event, expected",
        [
            (None, None, ChangeEvent(kind=ChangeKind.THREADS), True),
            (ChangeKind.THREADS, None, ChangeEvent(kind=ChangeKind.MESSAGES, thread_id="a"), False),
            (None, "a", ChangeEvent(kind=ChangeKind.MESSAGES, thread_id="a"), True),
            (None, "a", ChangeEvent(kind=ChangeKind.THREADS), False),
        ],
    )
    def test_matches(self, kind, thread_id, event, expected):
        notifier = ChangeNotifier()
        subscription = notifier.subscribe(lambda e: None, kind=kind, thread_id=thread_id)
        assert subscription.matches(event) is expected
