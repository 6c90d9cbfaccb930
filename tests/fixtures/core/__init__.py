"""Core fixtures: clocks, records, environments and engines."""

from tests.fixtures.core.times import (
    create_simulation_clock,
    FIXED_START,
)
from tests.fixtures.core.messages import (
    create_message,
    create_outgoing_message,
    create_conversation,
    create_reaction,
)
from tests.fixtures.core.threads import (
    create_thread,
    create_members,
    create_group_thread,
    create_note_to_self,
)
from tests.fixtures.core.environments import (
    create_environment,
    create_environment_with_threads,
)
from tests.fixtures.core.engines import (
    create_config,
    create_engine,
    create_seeded_engine,
)

__all__ = [
    "create_simulation_clock",
    "FIXED_START",
    "create_message",
    "create_outgoing_message",
    "create_conversation",
    "create_reaction",
    "create_thread",
    "create_members",
    "create_group_thread",
    "create_note_to_self",
    "create_environment",
    "create_environment_with_threads",
    "create_config",
    "create_engine",
    "create_seeded_engine",
]
