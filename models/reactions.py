"""Reaction add/remove on top of the conversation store."""

import logging
from typing import Optional

from models.conversation_store import ConversationStore
from models.message import Reaction

logger = logging.getLogger(__name__)


class ReactionLedger:
    """Adds and removes emoji reactions on stored messages.

    A message carries at most one reaction per (emoji, reactor_id) pair.
    Changes are written back through ConversationStore.update_message, so
    they publish like any other message update.

    Args:
        conversations: Store holding the messages being reacted to.
    """

    def __init__(self, conversations: ConversationStore) -> None:
        self.conversations = conversations

    def add_reaction(
        self,
        thread_id: str,
        message_id: str,
        emoji: str,
        reactor_id: str = "me",
        reactor_display_name: Optional[str] = "Me",
    ) -> Optional[Reaction]:
        """Attach a reaction to a message.

        Args:
            thread_id: Thread owning the message.
            message_id: Message to react to.
            emoji: Reaction emoji.
            reactor_id: Who is reacting.
            reactor_display_name: Display name of the reactor.

        Returns:
            The new Reaction, or None if the message was not found or the
            reactor already reacted with this emoji.
        """
        message = self.conversations.get_message(thread_id, message_id)
        if message is None:
            return None

        if any(
            r.emoji == emoji and r.reactor_id == reactor_id for r in message.reactions
        ):
            logger.debug(
                f"Reaction {emoji} by {reactor_id} already on message {message_id}"
            )
            return None

        reaction = Reaction(
            emoji=emoji,
            reactor_id=reactor_id,
            reactor_display_name=reactor_display_name,
        )
        self.conversations.update_message(
            thread_id, message.with_reactions([*message.reactions, reaction])
        )
        return reaction

    def remove_reaction(self, thread_id: str, message_id: str, reaction_id: str) -> bool:
        """Remove a reaction by its id.

        Returns:
            True if a reaction was removed.
        """
        message = self.conversations.get_message(thread_id, message_id)
        if message is None:
            return False

        remaining = [r for r in message.reactions if r.id != reaction_id]
        if len(remaining) == len(message.reactions):
            return False

        self.conversations.update_message(thread_id, message.with_reactions(remaining))
        return True

    def reactions_for_message(self, thread_id: str, message_id: str) -> list[Reaction]:
        message = self.conversations.get_message(thread_id, message_id)
        return list(message.reactions) if message else []
