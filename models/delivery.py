"""Delivery state machine for outgoing messages.

The transition function is pure; SimulationEngine drives it with scheduled
tasks so tests can step through it by advancing simulator time.

    SENDING --ACKNOWLEDGED--> SENT --DELIVERED--> DELIVERED --READ--> READ
       |                        |                    |
       +--DELIVERED-------------+                    |
       +--FAILED--> FAILED <----+--------FAILED------+

READ and FAILED are terminal.

The simulated transport skips SENT and goes straight from SENDING to
DELIVERED. ACKNOWLEDGED covers messages that already sit at SENT, such as
seed data, and transports that report a server acknowledgement.
"""

from enum import Enum
from typing import Optional

from models.message import DeliveryStatus
from models.thread import MessageStatus

SIMULATED_FAILURE_REASON = "Simulated network failure"


class DeliveryEvent(str, Enum):
    """Something that happened to an outgoing message in transit."""

    ACKNOWLEDGED = "acknowledged"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"


_TRANSITIONS: dict[tuple[DeliveryStatus, DeliveryEvent], DeliveryStatus] = {
    (DeliveryStatus.SENDING, DeliveryEvent.ACKNOWLEDGED): DeliveryStatus.SENT,
    (DeliveryStatus.SENDING, DeliveryEvent.DELIVERED): DeliveryStatus.DELIVERED,
    (DeliveryStatus.SENDING, DeliveryEvent.FAILED): DeliveryStatus.FAILED,
    (DeliveryStatus.SENT, DeliveryEvent.DELIVERED): DeliveryStatus.DELIVERED,
    (DeliveryStatus.SENT, DeliveryEvent.FAILED): DeliveryStatus.FAILED,
    (DeliveryStatus.DELIVERED, DeliveryEvent.READ): DeliveryStatus.READ,
    (DeliveryStatus.DELIVERED, DeliveryEvent.FAILED): DeliveryStatus.FAILED,
}

TERMINAL_STATES = frozenset({DeliveryStatus.READ, DeliveryStatus.FAILED})


def next_delivery_state(state: DeliveryStatus, event: DeliveryEvent) -> DeliveryStatus:
    """Compute the state after an event.

    Args:
        state: Current delivery status.
        event: Event being applied.

    Returns:
        The new delivery status.

    Raises:
        ValueError: If the event is not valid in the current state.
    """
    try:
        return _TRANSITIONS[(DeliveryStatus(state), DeliveryEvent(event))]
    except KeyError:
        raise ValueError(
            f"Invalid delivery transition: {DeliveryEvent(event).value} "
            f"from {DeliveryStatus(state).value}"
        ) from None


def can_transition(state: DeliveryStatus, event: DeliveryEvent) -> bool:
    return (DeliveryStatus(state), DeliveryEvent(event)) in _TRANSITIONS


def is_terminal(state: DeliveryStatus) -> bool:
    return DeliveryStatus(state) in TERMINAL_STATES


def thread_status_for(state: DeliveryStatus) -> MessageStatus:
    """Chat-list status shown for a last message in the given delivery state."""
    return MessageStatus(DeliveryStatus(state).value)
