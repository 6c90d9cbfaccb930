"""Environment model - container for the messaging state."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from models.conversation_store import ConversationStore
from models.notifications import ChangeNotifier
from models.reactions import ReactionLedger
from models.thread_store import ThreadStore
from models.time import SimulationClock


class MessagingEnvironment(BaseModel):
    """Everything the engine mutates, wired to one ChangeNotifier.

    The environment is a passive container: it does not schedule or run
    anything. Build one with MessagingEnvironment.create() so the stores
    share a notifier.

    Args:
        notifier: Hub receiving every change event.
        conversations: Per-thread message collections.
        threads: Chat list and group rosters.
        reactions: Reaction add/remove on stored messages.
        clock: Simulator time.
        user_id: Member id of the local user.
    """

    notifier: ChangeNotifier
    conversations: ConversationStore
    threads: ThreadStore
    reactions: ReactionLedger
    clock: SimulationClock
    user_id: str = Field(default="me")

    class Config:
        arbitrary_types_allowed = True

    @model_validator(mode="after")
    def validate_wiring(self) -> "MessagingEnvironment":
        """Ensure all stores share the environment's notifier and data."""
        if self.conversations.notifier is not self.notifier:
            raise ValueError("ConversationStore must publish to the environment notifier")
        if self.threads.notifier is not self.notifier:
            raise ValueError("ThreadStore must publish to the environment notifier")
        if self.threads.conversations is not self.conversations:
            raise ValueError("ThreadStore must own the environment's ConversationStore")
        if self.reactions.conversations is not self.conversations:
            raise ValueError("ReactionLedger must use the environment's ConversationStore")
        return self

    @classmethod
    def create(
        cls, start_time: Optional[datetime] = None, user_id: str = "me"
    ) -> "MessagingEnvironment":
        """Build an empty environment.

        Args:
            start_time: Initial simulator time (defaults to now, UTC).
            user_id: Member id of the local user.

        Returns:
            New environment with empty stores.
        """
        notifier = ChangeNotifier()
        conversations = ConversationStore(notifier)
        return cls(
            notifier=notifier,
            conversations=conversations,
            threads=ThreadStore(conversations, notifier, user_id=user_id),
            reactions=ReactionLedger(conversations),
            clock=SimulationClock.starting_at(start_time or datetime.now(timezone.utc)),
            user_id=user_id,
        )

    @property
    def now(self) -> datetime:
        return self.clock.current_time

    def get_snapshot(self) -> dict[str, Any]:
        """Export the current state.

        Returns:
            Dictionary with 'time', 'threads' and 'messages' keys, where
            'messages' maps each thread id to its sorted messages.
        """
        threads = self.threads.list_threads()
        return {
            "time": self.clock.to_dict(),
            "threads": [t.to_dict() for t in threads],
            "messages": {
                t.id: [m.to_dict() for m in self.conversations.messages_for_thread(t.id)]
                for t in threads
            },
        }

    def validate(self) -> list[str]:
        """Validate environment consistency.

        Returns:
            List of validation error messages (empty if valid).
        """
        errors = [f"clock: {e}" for e in self.clock.validate()]
        errors.extend(f"threads: {e}" for e in self.threads.validate())
        errors.extend(f"conversations: {e}" for e in self.conversations.validate())

        known = {t.id for t in self.threads.list_threads()}
        for thread_id in self.conversations.thread_ids:
            if thread_id not in known:
                errors.append(f"conversations: messages stored for unknown thread {thread_id}")
        return errors

    def clear(self) -> None:
        """Drop every thread and message without publishing."""
        self.threads.clear()
        self.conversations.clear()
