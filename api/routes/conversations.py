"""Conversation endpoints.

Read a thread's messages, send as the local user, remove messages and add
or remove reactions.
"""

from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Query

from api.dependencies import SimulationEngineDep
from api.exceptions import MessageNotFoundError, ThreadNotFoundError
from api.models import (
    GroupedMessagesResponse,
    MessageListResponse,
    ReactionRequest,
    ReactionResponse,
    RemovalResponse,
    SendMessageRequest,
)
from models.message import Message
from models.simulation import SimulationEngine

router = APIRouter(
    prefix="/threads/{thread_id}/messages",
    tags=["conversations"],
)


def _require_message(engine: SimulationEngine, thread_id: str, message_id: str) -> Message:
    if engine.get_thread(thread_id) is None:
        raise ThreadNotFoundError(thread_id)
    message = engine.get_message(thread_id, message_id)
    if message is None:
        raise MessageNotFoundError(thread_id, message_id)
    return message


@router.get("", response_model=MessageListResponse)
async def list_messages(thread_id: str, engine: SimulationEngineDep):
    """Get a thread's messages sorted by sort_key.

    An unknown thread has no messages; this is not an error.
    """
    messages = engine.messages_for_thread(thread_id)
    return MessageListResponse(
        thread_id=thread_id, messages=messages, total_count=len(messages)
    )


@router.get("/grouped", response_model=GroupedMessagesResponse)
async def grouped_messages(
    thread_id: str,
    engine: SimulationEngineDep,
    tz: Optional[str] = Query(default=None, description="IANA zone for calendar days"),
):
    """Get a thread's messages split into contiguous same-day runs.

    Args:
        thread_id: Thread to read.
        engine: The SimulationEngine instance (injected by FastAPI).
        tz: Zone used to compute days, e.g. "Europe/Paris". Defaults to the
            server's local zone.

    Raises:
        ValueError: If tz is not a known zone.
    """
    zone = None
    if tz:
        try:
            zone = ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone '{tz}'") from e

    groups = engine.grouped_messages(thread_id, zone)
    return GroupedMessagesResponse(thread_id=thread_id, timezone=tz, groups=groups)


@router.post("", response_model=Message)
async def send_message(thread_id: str, request: SendMessageRequest, engine: SimulationEngineDep):
    """Send a message as the local user.

    The message is returned with status "sending"; delivered and read
    follow as simulator time advances.

    Raises:
        ThreadNotFoundError: If the thread doesn't exist.
        ValueError: If the text is blank.
    """
    if engine.get_thread(thread_id) is None:
        raise ThreadNotFoundError(thread_id)

    message = engine.send_message(thread_id, request.text)
    if message is None:
        raise ValueError("Message text cannot be empty")
    return message


@router.delete("/{message_id}", response_model=RemovalResponse)
async def remove_message(thread_id: str, message_id: str, engine: SimulationEngineDep):
    _require_message(engine, thread_id, message_id)
    return RemovalResponse(removed=engine.remove_message(thread_id, message_id))


@router.post("/{message_id}/reactions", response_model=ReactionResponse)
async def add_reaction(
    thread_id: str,
    message_id: str,
    request: ReactionRequest,
    engine: SimulationEngineDep,
):
    """Add a reaction to a message.

    Reacting twice with the same emoji is not an error; the second request
    returns added=False.
    """
    _require_message(engine, thread_id, message_id)
    reaction = engine.add_reaction(
        thread_id,
        message_id,
        request.emoji,
        reactor_id=request.reactor_id,
        reactor_display_name=request.reactor_display_name,
    )
    return ReactionResponse(
        added=reaction is not None,
        reaction=reaction,
        message=engine.get_message(thread_id, message_id),
    )


@router.delete("/{message_id}/reactions/{reaction_id}", response_model=RemovalResponse)
async def remove_reaction(
    thread_id: str, message_id: str, reaction_id: str, engine: SimulationEngineDep
):
    _require_message(engine, thread_id, message_id)
    return RemovalResponse(
        removed=engine.remove_reaction(thread_id, message_id, reaction_id)
    )
