"""Thread list endpoints.

Query the chat list and apply the list-level mutations: archive, delete,
mute and read toggles, and mark-as-read.
"""

from typing import Optional

from fastapi import APIRouter, Query

from api.dependencies import SimulationEngineDep
from api.exceptions import ThreadNotFoundError
from api.models import MembersResponse, ThreadActionResponse, ThreadListResponse
from models.simulation import SimulationEngine
from models.thread import FilterMode, Thread

router = APIRouter(
    prefix="/threads",
    tags=["threads"],
)


def _require_thread(engine: SimulationEngine, thread_id: str) -> Thread:
    thread = engine.get_thread(thread_id)
    if thread is None:
        raise ThreadNotFoundError(thread_id)
    return thread


@router.get("", response_model=ThreadListResponse)
async def list_threads(
    engine: SimulationEngineDep,
    filter: FilterMode = Query(default=FilterMode.NONE, description="Thread filter"),
    search: Optional[str] = Query(default=None, description="Display name search"),
):
    """List threads in chat-list order.

    Args:
        engine: The SimulationEngine instance (injected by FastAPI).
        filter: "unread" keeps only unread threads.
        search: Case-insensitive substring of the display name.

    Returns:
        Matching threads.
    """
    threads = engine.list_threads(filter_mode=filter, search_text=search)
    return ThreadListResponse(
        threads=threads,
        total_count=len(threads),
        filter=filter,
        search=search,
    )


@router.get("/{thread_id}", response_model=Thread)
async def get_thread(thread_id: str, engine: SimulationEngineDep):
    return _require_thread(engine, thread_id)


@router.get("/{thread_id}/members", response_model=MembersResponse)
async def get_members(thread_id: str, engine: SimulationEngineDep):
    """Get a thread's group roster (empty for 1:1 threads)."""
    thread = _require_thread(engine, thread_id)
    members, participant_names = engine.members_for_thread(thread_id)
    return MembersResponse(
        thread_id=thread_id,
        is_group=thread.is_group,
        members=members,
        participant_names=participant_names,
    )


@router.post("/{thread_id}/archive", response_model=ThreadActionResponse)
async def archive_thread(thread_id: str, engine: SimulationEngineDep):
    """Archive a thread, discarding its messages and members."""
    _require_thread(engine, thread_id)
    removed = engine.archive_thread(thread_id)
    return ThreadActionResponse(thread_id=thread_id, action="archive", changed=removed)


@router.delete("/{thread_id}", response_model=ThreadActionResponse)
async def delete_thread(thread_id: str, engine: SimulationEngineDep):
    """Delete a thread, discarding its messages and members."""
    _require_thread(engine, thread_id)
    removed = engine.delete_thread(thread_id)
    return ThreadActionResponse(thread_id=thread_id, action="delete", changed=removed)


@router.post("/{thread_id}/mute/toggle", response_model=ThreadActionResponse)
async def toggle_mute(thread_id: str, engine: SimulationEngineDep):
    _require_thread(engine, thread_id)
    thread = engine.toggle_mute(thread_id)
    return ThreadActionResponse(
        thread_id=thread_id, action="toggle_mute", changed=thread is not None, thread=thread
    )


@router.post("/{thread_id}/read/toggle", response_model=ThreadActionResponse)
async def toggle_read(thread_id: str, engine: SimulationEngineDep):
    """Flip the unread flag (unread_count becomes 1 or 0)."""
    _require_thread(engine, thread_id)
    thread = engine.toggle_read(thread_id)
    return ThreadActionResponse(
        thread_id=thread_id, action="toggle_read", changed=thread is not None, thread=thread
    )


@router.post("/{thread_id}/read", response_model=ThreadActionResponse)
async def mark_as_read(thread_id: str, engine: SimulationEngineDep):
    """Mark a thread read.

    Returns changed=False, with the unchanged thread, when it was already
    read.
    """
    current = _require_thread(engine, thread_id)
    thread = engine.mark_as_read(thread_id)
    return ThreadActionResponse(
        thread_id=thread_id,
        action="mark_as_read",
        changed=thread is not None,
        thread=thread or current,
    )
