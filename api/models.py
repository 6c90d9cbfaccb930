"""Shared request and response models for API endpoints.

Core records (Thread, Message, Reaction, GroupMember, MessageGroup) are
pydantic models already and are returned as-is; the models here wrap them
with the request context.
"""

from typing import Optional

from pydantic import BaseModel, Field

from models.message import Message, MessageGroup, Reaction
from models.thread import FilterMode, GroupMember, Thread


class ThreadListResponse(BaseModel):
    """Response model for the thread list.

    Attributes:
        threads: Matching threads in list order.
        total_count: Number of threads returned.
        filter: Filter that was applied.
        search: Search text that was applied.
    """

    threads: list[Thread]
    total_count: int
    filter: FilterMode = FilterMode.NONE
    search: Optional[str] = None


class ThreadActionResponse(BaseModel):
    """Response model for thread mutations.

    Attributes:
        thread_id: Thread the action addressed.
        action: Action name ("archive", "toggle_mute", ...).
        changed: Whether the action changed any state.
        thread: Thread after the action (None once removed).
    """

    thread_id: str
    action: str
    changed: bool
    thread: Optional[Thread] = None


class MembersResponse(BaseModel):
    thread_id: str
    is_group: bool
    members: list[GroupMember]
    participant_names: list[str]


class MessageListResponse(BaseModel):
    thread_id: str
    messages: list[Message]
    total_count: int


class GroupedMessagesResponse(BaseModel):
    """Messages split into contiguous same-day runs.

    Attributes:
        thread_id: Thread the messages belong to.
        timezone: Zone used to compute calendar days (None means server local).
        groups: Runs in display order.
    """

    thread_id: str
    timezone: Optional[str] = None
    groups: list[MessageGroup]


class SendMessageRequest(BaseModel):
    text: str = Field(description="Message body; surrounding whitespace is trimmed")


class ReactionRequest(BaseModel):
    """Request model for adding a reaction.

    Attributes:
        emoji: Reaction emoji.
        reactor_id: Who reacts (defaults to the local user).
        reactor_display_name: Display name of the reactor.
    """

    emoji: str = Field(min_length=1, description="Reaction emoji")
    reactor_id: Optional[str] = Field(default=None, description="Who is reacting")
    reactor_display_name: Optional[str] = Field(
        default=None, description="Display name of the reactor"
    )


class ReactionResponse(BaseModel):
    """Result of adding a reaction.

    Attributes:
        added: False when the reactor already reacted with this emoji.
        reaction: The new reaction when added.
        message: The message after the change.
    """

    added: bool
    reaction: Optional[Reaction] = None
    message: Message


class RemovalResponse(BaseModel):
    removed: bool
