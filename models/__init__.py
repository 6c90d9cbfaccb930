"""Thread simulator data models package.

This package contains the conversation and thread records, the stores that
hold them, change notification, and the simulation engine that drives
synthetic traffic and message delivery on simulator time.
"""

from models.config import SimulationConfig
from models.conversation_store import ConversationStore, group_by_date
from models.delivery import DeliveryEvent, next_delivery_state
from models.environment import MessagingEnvironment
from models.message import DeliveryStatus, Message, MessageGroup, Reaction
from models.notifications import ChangeEvent, ChangeKind, ChangeNotifier, Subscription
from models.reactions import ReactionLedger
from models.scheduler import ScheduledTask, Scheduler, TaskStatus
from models.simulation import SimulationEngine, SimulationLoop
from models.thread import FilterMode, GroupMember, MessageStatus, Thread
from models.thread_store import ThreadStore
from models.time import ClockMode, SimulationClock

__all__ = [
    "SimulationConfig",
    "ConversationStore",
    "group_by_date",
    "DeliveryEvent",
    "next_delivery_state",
    "MessagingEnvironment",
    "DeliveryStatus",
    "Message",
    "MessageGroup",
    "Reaction",
    "ChangeEvent",
    "ChangeKind",
    "ChangeNotifier",
    "Subscription",
    "ReactionLedger",
    "ScheduledTask",
    "Scheduler",
    "TaskStatus",
    "SimulationEngine",
    "SimulationLoop",
    "FilterMode",
    "GroupMember",
    "MessageStatus",
    "Thread",
    "ThreadStore",
    "ClockMode",
    "SimulationClock",
]
