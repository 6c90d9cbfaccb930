"""Change notification for store mutations.

Stores publish a ChangeEvent after every applied mutation. Consumers (the
chat list, an open conversation screen, the REST layer) subscribe and
re-render from the event payload instead of polling.
"""

import logging
from enum import Enum
from typing import Callable, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from models.message import Message
from models.thread import Thread

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    """What changed."""

    THREADS = "threads"
    MESSAGES = "messages"
    SCROLL_TO = "scroll_to"


class ChangeEvent(BaseModel):
    """A single published change.

    Args:
        kind: What changed.
        sequence: Monotonic publication number, starting at 1.
        thread_id: Affected thread (MESSAGES and SCROLL_TO only).
        threads: Full current thread list (THREADS only).
        messages: Full sorted message list of thread_id (MESSAGES only).
        message_id: Message to scroll to (SCROLL_TO only).
    """

    kind: ChangeKind
    sequence: int = 0
    thread_id: Optional[str] = None
    threads: list[Thread] = Field(default_factory=list)
    messages: list[Message] = Field(default_factory=list)
    message_id: Optional[str] = None


ChangeCallback = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by ChangeNotifier.subscribe()."""

    def __init__(
        self,
        notifier: "ChangeNotifier",
        callback: ChangeCallback,
        kind: Optional[ChangeKind],
        thread_id: Optional[str],
    ) -> None:
        self.subscription_id = str(uuid4())
        self.callback = callback
        self.kind = kind
        self.thread_id = thread_id
        self._notifier = notifier

    @property
    def is_active(self) -> bool:
        return self._notifier.is_subscribed(self)

    def matches(self, event: ChangeEvent) -> bool:
        """Check whether this subscription wants the event."""
        if self.kind is not None and event.kind != self.kind:
            return False
        if self.thread_id is not None and event.thread_id != self.thread_id:
            return False
        return True

    def unsubscribe(self) -> None:
        """Stop receiving events. Safe to call more than once."""
        self._notifier.unsubscribe(self)


class ChangeNotifier:
    """Synchronous publish/subscribe hub.

    Events are delivered in publication order on the caller's context,
    which is the engine's single logical actor. A subscriber that raises is
    logged and skipped; delivery to the remaining subscribers continues.
    """

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._sequence = 0

    @property
    def sequence(self) -> int:
        """Sequence number of the last published event."""
        return self._sequence

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(
        self,
        callback: ChangeCallback,
        kind: Optional[ChangeKind] = None,
        thread_id: Optional[str] = None,
    ) -> Subscription:
        """Register a callback.

        Args:
            callback: Called with each matching ChangeEvent.
            kind: Only receive events of this kind (all kinds if None).
            thread_id: Only receive events for this thread. THREADS events
                carry no thread_id, so a thread filter excludes them.

        Returns:
            Subscription handle.
        """
        subscription = Subscription(self, callback, kind, thread_id)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        self._subscriptions = [
            s for s in self._subscriptions if s is not subscription
        ]

    def is_subscribed(self, subscription: Subscription) -> bool:
        return any(s is subscription for s in self._subscriptions)

    def publish(self, event: ChangeEvent) -> ChangeEvent:
        """Stamp the event with the next sequence number and deliver it.

        Args:
            event: Event to deliver.

        Returns:
            The delivered event (with its sequence set).
        """
        self._sequence += 1
        event = event.model_copy(update={"sequence": self._sequence})

        # Snapshot so callbacks may subscribe/unsubscribe while we iterate
        for subscription in list(self._subscriptions):
            if not subscription.matches(event):
                continue
            try:
                subscription.callback(event)
            except Exception as e:
                logger.error(
                    f"Subscriber {subscription.subscription_id} failed on "
                    f"{event.kind.value} event {event.sequence}: {e}",
                    exc_info=True,
                )
        return event

    def publish_threads(self, threads: list[Thread]) -> ChangeEvent:
        return self.publish(ChangeEvent(kind=ChangeKind.THREADS, threads=threads))

    def publish_messages(self, thread_id: str, messages: list[Message]) -> ChangeEvent:
        return self.publish(
            ChangeEvent(kind=ChangeKind.MESSAGES, thread_id=thread_id, messages=messages)
        )

    def publish_scroll_to(self, thread_id: str, message_id: str) -> ChangeEvent:
        return self.publish(
            ChangeEvent(
                kind=ChangeKind.SCROLL_TO,
                thread_id=thread_id,
                message_id=message_id,
            )
        )
