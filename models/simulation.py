"""Simulation orchestration.

SimulationEngine is the single logical actor that mutates the stores: it
generates synthetic inbound traffic and typing episodes, drives the delivery
state machine for outgoing messages, and moves simulator time. Time-based
work runs as ScheduledTasks on simulator time, so it only happens when time
is advanced, either explicitly with advance_time() or by the SimulationLoop
thread in auto-advance mode.
"""

import logging
import random
import threading
import uuid
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from models.config import SimulationConfig
from models.delivery import (
    SIMULATED_FAILURE_REASON,
    DeliveryEvent,
    can_transition,
    next_delivery_state,
    thread_status_for,
)
from models.environment import MessagingEnvironment
from models.message import DeliveryStatus, Message, MessageGroup, Reaction
from models.notifications import ChangeCallback, ChangeKind, Subscription
from models.scheduler import ScheduledTask, Scheduler
from models.thread import FilterMode, GroupMember, MessageStatus, Thread

logger = logging.getLogger(__name__)

INBOUND_GROUP = "inbound"
TYPING_GROUP = "typing"
DELIVERY_GROUP = "delivery"

DIRECT_REPLIES = [
    "Hey, what's up?",
    "Did you see that?",
    "Can you call me?",
    "Thanks!",
    "See you later!",
    "Sounds good!",
    "Just finished lunch",
    "On my way!",
]

GROUP_REPLIES = [
    "Anyone free this weekend?",
    "Check out this article I found",
    "Running late, be there in 10",
    "That's hilarious 😂",
    "Good point!",
    "I agree with that",
    "Has anyone heard back yet?",
    "Let me look into it",
    "Just saw your message",
    "Can someone help me with this?",
    "Sounds like a plan!",
    "Don't forget about tomorrow",
    "Great news everyone!",
    "I'll handle that",
    "Let's discuss this later",
]


class SimulationEngine(BaseModel):
    """Main orchestrator for the thread simulator.

    Responsibilities:
    - Lifecycle (start, stop) of the inbound and typing generators
    - Time control (advance_time, tick) and execution of due tasks
    - User sends and their delivery transitions
    - Serialized access to the stores for external callers
    - State snapshots and validation

    Every mutation and query runs under one operation lock, including ticks
    from the auto-advance thread, so store changes are applied and published
    one at a time in a single order. The lock is reentrant: a change
    subscriber may call back into the engine (e.g. mark_as_read when a
    message arrives) from inside its callback.

    Attributes:
        environment: Stores and clock being simulated.
        scheduler: Pending timers on simulator time.
        config: Simulation tunables.
        simulation_id: Unique identifier for this simulation instance.
        is_running: Whether the synthetic-traffic generators are armed.
    """

    environment: MessagingEnvironment
    scheduler: Scheduler = Field(default_factory=Scheduler)
    config: SimulationConfig = Field(default_factory=SimulationConfig)
    simulation_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    is_running: bool = False

    class Config:
        arbitrary_types_allowed = True

    def __init__(self, **data):
        """Initialize with private attributes."""
        super().__init__(**data)
        self._loop: Optional[SimulationLoop] = None
        self._operation_lock = threading.RLock()
        self._rng = random.Random(self.config.random_seed)
        self._typing_thread_id: Optional[str] = None

    @classmethod
    def create(
        cls,
        config: Optional[SimulationConfig] = None,
        start_time: Optional[datetime] = None,
    ) -> "SimulationEngine":
        """Build an engine around a fresh, empty environment."""
        config = config or SimulationConfig()
        environment = MessagingEnvironment.create(
            start_time=start_time, user_id=config.user_id
        )
        return cls(environment=environment, config=config)

    @property
    def now(self) -> datetime:
        return self.environment.clock.current_time

    @property
    def typing_thread_id(self) -> Optional[str]:
        """Thread of the active typing episode, if any."""
        return self._typing_thread_id

    @property
    def mode(self) -> str:
        return "auto_advance" if (self._loop and self._loop.is_running) else "manual"

    # ===== Lifecycle Methods =====

    def start(self, auto_advance: bool = False, time_scale: float = 1.0) -> dict:
        """Arm the inbound-message and typing generators.

        The first typing episode starts immediately; the first inbound
        message is scheduled after a sampled interval.

        Args:
            auto_advance: Whether to start the SimulationLoop thread.
            time_scale: Time multiplier for auto-advance mode.

        Returns:
            Status dict with simulation_id, mode and current_time.

        Raises:
            RuntimeError: If the simulation is already running.
            ValueError: If the environment fails validation.
        """
        if self.is_running:
            raise RuntimeError("Simulation is already running")

        errors = self.validate()
        if errors:
            raise ValueError(f"Cannot start simulation with validation errors: {errors}")

        with self._operation_lock:
            self.is_running = True
            self._clear_stale_typing()
            self._schedule_inbound()
            self._start_typing_episode()

            if auto_advance:
                self.environment.clock.set_scale(time_scale)
                self.environment.clock.auto_advance = True

        if auto_advance:
            self._loop = SimulationLoop(engine=self)
            self._loop.start()

        logger.info(
            f"Simulation {self.simulation_id} started in {self.mode} mode at {self.now}"
        )

        return {
            "simulation_id": self.simulation_id,
            "status": "running",
            "mode": self.mode,
            "current_time": self.now.isoformat(),
            "time_scale": time_scale if auto_advance else None,
        }

    def stop(self) -> dict:
        """Cancel every pending timer and the auto-advance loop.

        State is left exactly as it is: a thread flagged as typing stays
        flagged, and a sent message keeps whatever delivery status it had
        reached. Nothing scheduled before the stop fires afterwards.

        Returns:
            Summary dict with final_time and the number of cancelled timers.
        """
        if not self.is_running:
            logger.warning("stop() called but simulation is not running")
            return {
                "simulation_id": self.simulation_id,
                "status": "stopped",
                "final_time": None,
                "cancelled_tasks": 0,
            }

        # Stop the loop outside the lock; its tick() needs the lock to finish
        if self._loop and self._loop.is_running:
            self._loop.stop()
        self._loop = None

        with self._operation_lock:
            cancelled = self.scheduler.cancel_group(INBOUND_GROUP)
            cancelled += self.scheduler.cancel_group(TYPING_GROUP)
            cancelled += self.scheduler.cancel_group(DELIVERY_GROUP)
            self._typing_thread_id = None
            self.is_running = False
            self.environment.clock.auto_advance = False

        logger.info(f"Simulation {self.simulation_id} stopped at {self.now}")

        return {
            "simulation_id": self.simulation_id,
            "status": "stopped",
            "final_time": self.now.isoformat(),
            "cancelled_tasks": cancelled,
        }

    # ===== Time Control Methods =====

    def advance_time(self, delta: timedelta) -> dict:
        """Move simulator time forward and run every task that falls due.

        Tasks run in due-time order with the clock set to each task's due
        time, so timestamps created by a task reflect when it was due. Tasks
        scheduled by a task run in the same call if they fall due before the
        target. Works whether or not the generators are running; a message
        sent while stopped is still delivered.

        Args:
            delta: Amount of simulator time to advance.

        Returns:
            Dict with current_time, tasks_executed and execution_details.

        Raises:
            ValueError: If delta <= 0.
        """
        if delta <= timedelta(0):
            raise ValueError(f"Time delta must be positive, got {delta}")

        with self._operation_lock:
            executed = self._run_until(self.now + delta)

            logger.debug(
                f"Advanced time by {delta}, now at {self.now}, "
                f"executed {len(executed)} tasks"
            )

            return {
                "current_time": self.now.isoformat(),
                "time_advanced": str(delta),
                "tasks_executed": len(executed),
                "execution_details": [
                    {
                        "task_id": t.task_id,
                        "label": t.label,
                        "group": t.group,
                        "status": t.status.value,
                        "error": t.error_message,
                    }
                    for t in executed
                ],
            }

    def tick(self) -> None:
        """Advance by the scaled wall time since the previous tick.

        Called repeatedly by SimulationLoop in auto-advance mode.
        """
        with self._operation_lock:
            clock = self.environment.clock
            wall_now = datetime.now(timezone.utc)
            sim_delta = clock.calculate_advancement(wall_now - clock.last_wall_time_update)
            clock.last_wall_time_update = wall_now

            if sim_delta > timedelta(0):
                executed = self._run_until(clock.current_time + sim_delta)
                if executed:
                    logger.debug(f"Tick: advanced {sim_delta}, executed {len(executed)} tasks")

    # ===== Send / Delivery =====

    def send_message(self, thread_id: str, text: str) -> Optional[Message]:
        """Send a message from the local user.

        The message is appended immediately with status SENDING; DELIVERED
        follows after config.delivered_delay and READ after a further
        config.read_delay of simulator time.

        Args:
            thread_id: Target thread.
            text: Message body, trimmed before sending.

        Returns:
            The appended message, or None for blank text or an unknown thread.
        """
        body = (text or "").strip()
        if not body:
            return None

        with self._operation_lock:
            if self.environment.threads.get_thread(thread_id) is None:
                return None

            conversations = self.environment.conversations
            message = Message(
                sort_key=conversations.next_sort_key(thread_id, self.now),
                timestamp=self.now,
                body_text=body,
                is_outgoing=True,
                delivery_status=DeliveryStatus.SENDING,
                author_id=self.config.user_id,
                author_display_name=self.config.user_display_name,
            )
            conversations.append_message(thread_id, message)
            self.environment.threads.record_last_message(
                thread_id, message, status=MessageStatus.SENDING
            )

            self._schedule(
                timedelta(seconds=self.config.delivered_delay),
                lambda: self._deliver(thread_id, message.id),
                DELIVERY_GROUP,
                f"deliver {message.id}",
            )

            logger.debug(f"Sent message {message.id} to thread {thread_id}")
            return message

    # ===== Store Operations =====

    def archive_thread(self, thread_id: str) -> bool:
        with self._operation_lock:
            return self.environment.threads.archive_thread(thread_id)

    def delete_thread(self, thread_id: str) -> bool:
        with self._operation_lock:
            return self.environment.threads.delete_thread(thread_id)

    def toggle_mute(self, thread_id: str) -> Optional[Thread]:
        with self._operation_lock:
            return self.environment.threads.toggle_mute(thread_id)

    def toggle_read(self, thread_id: str) -> Optional[Thread]:
        with self._operation_lock:
            return self.environment.threads.toggle_read(thread_id)

    def mark_as_read(self, thread_id: str) -> Optional[Thread]:
        with self._operation_lock:
            return self.environment.threads.mark_as_read(thread_id)

    def remove_message(self, thread_id: str, message_id: str) -> bool:
        with self._operation_lock:
            return self.environment.conversations.remove_message(thread_id, message_id)

    def add_reaction(
        self,
        thread_id: str,
        message_id: str,
        emoji: str,
        reactor_id: Optional[str] = None,
        reactor_display_name: Optional[str] = None,
    ) -> Optional[Reaction]:
        """Add a reaction, defaulting the reactor to the local user."""
        if reactor_id is None:
            reactor_id = self.config.user_id
            reactor_display_name = reactor_display_name or self.config.user_display_name
        with self._operation_lock:
            return self.environment.reactions.add_reaction(
                thread_id, message_id, emoji, reactor_id, reactor_display_name
            )

    def remove_reaction(self, thread_id: str, message_id: str, reaction_id: str) -> bool:
        with self._operation_lock:
            return self.environment.reactions.remove_reaction(
                thread_id, message_id, reaction_id
            )

    def subscribe(
        self,
        callback: ChangeCallback,
        kind: Optional[ChangeKind] = None,
        thread_id: Optional[str] = None,
    ) -> Subscription:
        return self.environment.notifier.subscribe(callback, kind=kind, thread_id=thread_id)

    # ===== Queries =====
    #
    # Reads take the operation lock too, so a caller on another thread never
    # observes a store halfway through a mutation by the SimulationLoop.

    def list_threads(
        self,
        filter_mode: FilterMode = FilterMode.NONE,
        search_text: Optional[str] = None,
    ) -> list[Thread]:
        with self._operation_lock:
            return self.environment.threads.list_threads(filter_mode, search_text)

    def get_thread(self, thread_id: str) -> Optional[Thread]:
        with self._operation_lock:
            return self.environment.threads.get_thread(thread_id)

    def members_for_thread(self, thread_id: str) -> tuple[list[GroupMember], list[str]]:
        """Roster and participant names of a thread, read together."""
        with self._operation_lock:
            threads = self.environment.threads
            return (
                threads.members_for_thread(thread_id),
                threads.participant_names_for_thread(thread_id),
            )

    def messages_for_thread(self, thread_id: str) -> list[Message]:
        with self._operation_lock:
            return self.environment.conversations.messages_for_thread(thread_id)

    def grouped_messages(
        self, thread_id: str, tz: Optional[tzinfo] = None
    ) -> list[MessageGroup]:
        with self._operation_lock:
            return self.environment.conversations.grouped_messages(thread_id, tz)

    def get_message(self, thread_id: str, message_id: str) -> Optional[Message]:
        with self._operation_lock:
            return self.environment.conversations.get_message(thread_id, message_id)

    # ===== State Access Methods =====

    def get_status(self) -> dict[str, Any]:
        """Summary of the simulation for status endpoints."""
        with self._operation_lock:
            return self._status()

    def _status(self) -> dict[str, Any]:
        return {
            "simulation_id": self.simulation_id,
            "is_running": self.is_running,
            "mode": self.mode,
            "current_time": self.now.isoformat(),
            "thread_count": self.environment.threads.thread_count,
            "message_count": self.environment.conversations.message_count,
            "pending_tasks": self.scheduler.pending_count,
            "typing_thread_id": self._typing_thread_id,
        }

    def get_snapshot(self) -> dict:
        """Get complete state snapshot for API responses.

        Returns:
            Serializable dict with simulation metadata, config, the
            environment snapshot and scheduler summary.
        """
        with self._operation_lock:
            return self._snapshot()

    def _snapshot(self) -> dict:
        return {
            "simulation_id": self.simulation_id,
            "is_running": self.is_running,
            "mode": self.mode,
            "config": self.config.to_dict(),
            "environment": self.environment.get_snapshot(),
            "scheduler": self.scheduler.to_dict(),
        }

    def validate(self) -> list[str]:
        """Validate simulation consistency.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = [f"Environment: {e}" for e in self.environment.validate()]
        errors.extend(f"Scheduler: {e}" for e in self.scheduler.validate())
        if self.environment.user_id != self.config.user_id:
            errors.append(
                f"Environment user_id '{self.environment.user_id}' does not match "
                f"config user_id '{self.config.user_id}'"
            )
        return errors

    # ===== Internal/Helper Methods =====

    def _run_until(self, target: datetime) -> list[ScheduledTask]:
        clock = self.environment.clock
        executed = []
        while True:
            task = self.scheduler.pop_due(target)
            if task is None:
                break
            if task.due_time > clock.current_time:
                clock.set_time(task.due_time)
            self.scheduler.run_task(task)
            executed.append(task)
        clock.set_time(target)
        return executed

    def _schedule(
        self, delay: timedelta, callback: Callable[[], Any], group: str, label: str
    ) -> ScheduledTask:
        return self.scheduler.schedule(self.now, delay, callback, group=group, label=label)

    def _sample_seconds(self, low: float, high: float) -> timedelta:
        return timedelta(seconds=self._rng.uniform(low, high))

    # Inbound messages

    def _schedule_inbound(self) -> None:
        self._schedule(
            self._sample_seconds(
                self.config.inbound_interval_min, self.config.inbound_interval_max
            ),
            self._inbound_cycle,
            INBOUND_GROUP,
            "inbound message",
        )

    def _inbound_cycle(self) -> None:
        if not self.is_running:
            return
        # Re-arm first so a failing cycle does not end the chain
        self._schedule_inbound()
        self._generate_inbound_message()

    def _generate_inbound_message(self) -> Optional[Message]:
        """Append one synthetic message to a random thread.

        Returns:
            The new message, or None when this cycle is skipped.
        """
        threads = self.environment.threads.list_threads()
        if not threads:
            return None

        thread = self._rng.choice(threads)
        if thread.is_note_to_self:
            logger.debug(f"Inbound cycle skipped note-to-self thread {thread.id}")
            return None

        if thread.is_group:
            others = [
                m
                for m in self.environment.threads.members_for_thread(thread.id)
                if m.id != self.config.user_id
            ]
            if not others:
                logger.debug(f"Inbound cycle skipped group {thread.id} with no members")
                return None
            sender = self._rng.choice(others)
            author_id, author_name = sender.id, sender.name
            text = self._rng.choice(GROUP_REPLIES)
        else:
            author_id, author_name = thread.id, thread.display_name
            text = self._rng.choice(DIRECT_REPLIES)

        conversations = self.environment.conversations
        message = Message(
            sort_key=conversations.next_sort_key(thread.id, self.now),
            timestamp=self.now,
            body_text=text,
            is_outgoing=False,
            author_id=author_id,
            author_display_name=author_name,
        )
        conversations.append_message(thread.id, message)
        self.environment.threads.record_incoming(thread.id, message, sender_name=author_name)

        logger.debug(f"Inbound message {message.id} in thread {thread.id} from {author_name}")
        return message

    # Typing episodes

    def _clear_stale_typing(self) -> None:
        """Drop typing flags left behind by a previous stop()."""
        for thread in self.environment.threads.list_threads():
            if thread.is_typing:
                self.environment.threads.set_typing(thread.id, False)

    def _start_typing_episode(self) -> None:
        if not self.is_running:
            return

        threads = self.environment.threads.list_threads()
        candidates = [t for t in threads if not t.is_note_to_self and not t.is_typing]
        if len(threads) < self.config.typing_min_threads or not candidates:
            self._schedule_typing_rearm()
            return

        thread = self._rng.choice(candidates)
        self.environment.threads.set_typing(thread.id, True)
        self._typing_thread_id = thread.id

        self._schedule(
            self._sample_seconds(
                self.config.typing_duration_min, self.config.typing_duration_max
            ),
            lambda: self._finish_typing_episode(thread.id),
            TYPING_GROUP,
            f"stop typing {thread.id}",
        )
        logger.debug(f"Typing started in thread {thread.id}")

    def _finish_typing_episode(self, thread_id: str) -> None:
        if not self.is_running:
            return
        # No-op if the thread was removed or an inbound message cleared the flag
        self.environment.threads.set_typing(thread_id, False)
        self._typing_thread_id = None
        self._schedule_typing_rearm()
        logger.debug(f"Typing stopped in thread {thread_id}")

    def _schedule_typing_rearm(self) -> None:
        self._schedule(
            self._sample_seconds(self.config.typing_rearm_min, self.config.typing_rearm_max),
            self._start_typing_episode,
            TYPING_GROUP,
            "typing episode",
        )

    # Delivery

    def _deliver(self, thread_id: str, message_id: str) -> None:
        if self.config.failure_rate > 0 and self._rng.random() < self.config.failure_rate:
            self._apply_delivery_event(
                thread_id, message_id, DeliveryEvent.FAILED, SIMULATED_FAILURE_REASON
            )
            return

        if self._apply_delivery_event(thread_id, message_id, DeliveryEvent.DELIVERED):
            self._schedule(
                timedelta(seconds=self.config.read_delay),
                lambda: self._apply_delivery_event(
                    thread_id, message_id, DeliveryEvent.READ
                ),
                DELIVERY_GROUP,
                f"read {message_id}",
            )

    def _apply_delivery_event(
        self,
        thread_id: str,
        message_id: str,
        event: DeliveryEvent,
        reason: Optional[str] = None,
    ) -> bool:
        """Move a sent message through one delivery transition.

        Returns:
            True if the message was updated, False if it no longer exists or
            the transition does not apply to its current status.
        """
        conversations = self.environment.conversations
        message = conversations.get_message(thread_id, message_id)
        if message is None:
            logger.debug(f"Delivery {event.value} for missing message {message_id} skipped")
            return False
        if not can_transition(message.delivery_status, event):
            return False

        status = next_delivery_state(message.delivery_status, event)
        conversations.update_message(thread_id, message.with_status(status, reason))

        last = conversations.last_message(thread_id)
        if last is not None and last.id == message_id:
            self.environment.threads.set_last_message_status(
                thread_id, thread_status_for(status)
            )

        if status is DeliveryStatus.FAILED:
            logger.warning(f"Message {message_id} in thread {thread_id} failed: {reason}")
        return True


class SimulationLoop:
    """Background thread for auto-advance mode.

    Calls SimulationEngine.tick() every tick_interval seconds until stopped.
    Errors raised by a tick are logged and the loop keeps going.

    Attributes:
        engine: Parent SimulationEngine to call back to.
        tick_interval: Seconds between ticks (default 10ms).
        is_running: Whether loop thread is active.
    """

    def __init__(self, engine: SimulationEngine, tick_interval: float = 0.01) -> None:
        self.engine = engine
        self.tick_interval = tick_interval

        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self.is_running = False

    def start(self) -> None:
        """Start the loop thread.

        Raises:
            RuntimeError: If loop is already running.
        """
        if self.is_running:
            raise RuntimeError("Simulation loop is already running")

        self.is_running = True
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()

        logger.info("SimulationLoop started")

    def stop(self) -> None:
        """Signal the thread and wait for its current tick to finish."""
        if not self.is_running:
            return

        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=1.0)

        self.is_running = False
        self._thread = None

        logger.info("SimulationLoop stopped")

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            if not self.engine.environment.clock.is_paused:
                try:
                    self.engine.tick()
                except Exception as e:
                    logger.error(f"Error during simulation tick: {e}", exc_info=True)

            self._stop_event.wait(self.tick_interval)
