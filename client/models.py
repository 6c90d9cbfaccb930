"""Client response models for the thread simulator API client.

This module re-exports the API layer's response models and the core records
they carry, and defines client-specific models that don't exist in the API
layer.
"""

from pydantic import BaseModel, Field

# Re-export common models from API layer for client convenience
from api.models import (
    GroupedMessagesResponse,
    MembersResponse,
    MessageListResponse,
    ReactionResponse,
    RemovalResponse,
    ThreadActionResponse,
    ThreadListResponse,
)
from models.message import DeliveryStatus, Message, MessageGroup, Reaction
from models.thread import FilterMode, GroupMember, MessageStatus, Thread

__all__ = [
    # Re-exported from api.models
    "GroupedMessagesResponse",
    "MembersResponse",
    "MessageListResponse",
    "ReactionResponse",
    "RemovalResponse",
    "ThreadActionResponse",
    "ThreadListResponse",
    # Core records
    "DeliveryStatus",
    "FilterMode",
    "GroupMember",
    "Message",
    "MessageGroup",
    "MessageStatus",
    "Reaction",
    "Thread",
    # Client-specific models
    "HealthResponse",
]


class HealthResponse(BaseModel):
    status: str = Field(..., description="Server health status")
