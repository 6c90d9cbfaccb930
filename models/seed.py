"""Demo dataset: direct contacts, group chats and a note-to-self thread."""

import logging
import random
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel

from models.environment import MessagingEnvironment
from models.message import DeliveryStatus, Message, Reaction
from models.thread import (
    DirectMessageSnippet,
    DraftSnippet,
    GroupMember,
    GroupMessageSnippet,
    MessageStatus,
    Thread,
)

logger = logging.getLogger(__name__)


class GroupDefinition(BaseModel):
    """A demo group chat and its scripted conversation."""

    name: str
    members: list[GroupMember]
    is_pinned: bool = False
    is_muted: bool = False
    flow: list[str]


CONTACTS = [
    "Alice Johnson",
    "Bob Smith",
    "Carol Williams",
    "David Brown",
    "Eve Davis",
    "Frank Miller",
    "Jack Black",
    "Joe Smith",
    "Karen White",
    "Lisa Johnson",
]

CONTACT_SNIPPETS = [
    "Hey! How are you doing today?",
    "Did you see the game last night?",
    "Can you send me that file?",
    "Thanks for your help!",
    "Let's meet up soon",
]

GROUP_SNIPPETS = [
    "Meeting tomorrow at 3pm",
    "Who's bringing the snacks?",
    "Great job everyone!",
    "See you all Saturday!",
    "Just sent the photos",
]

DIRECT_CONVERSATION = [
    "Hey, how are you?",
    "I'm good, thanks for asking!",
    "Did you see the news today?",
    "Yes, it's pretty interesting.",
    "Let's catch up soon!",
    "Sounds great!",
    "What time works for you?",
    "How about 3pm?",
    "Perfect, see you then!",
    "Great, looking forward to it!",
]

NOTE_TO_SELF_DRAFT = "Shopping list: milk, eggs, bread"

SYSTEM_AUTHOR_ID = "system"


def _member(member_id: str, name: str, is_admin: bool = False) -> GroupMember:
    return GroupMember(id=member_id, name=name, is_admin=is_admin)


def group_definitions(user_id: str = "me", user_name: str = "Me") -> list[GroupDefinition]:
    """The five demo groups, with the local user as a member of each."""
    return [
        GroupDefinition(
            name="Family Chat 👨‍👩‍👧‍👦",
            members=[
                _member(user_id, user_name, True),
                _member("mom", "Mom", True),
                _member("dad", "Dad"),
                _member("sarah", "Sarah"),
                _member("mike", "Mike"),
            ],
            is_pinned=True,
            flow=[
                "Hey everyone! Dinner at our place this Sunday?",
                "Sounds great! What time?",
                "How about 6pm?",
                "I'll bring dessert 🍰",
                "Perfect! I'll make pasta",
                "Can't wait! Should I bring anything?",
                "Just bring yourselves 😊",
                "See you all Sunday!",
            ],
        ),
        GroupDefinition(
            name="Work Team",
            members=[
                _member(user_id, user_name),
                _member("alice_j", "Alice Johnson", True),
                _member("bob_s", "Bob Smith", True),
                _member("carol_w", "Carol Williams"),
                _member("david_b", "David Brown"),
                _member("eve_d", "Eve Davis"),
                _member("frank_m", "Frank Miller"),
            ],
            is_muted=True,
            flow=[
                "Team, the client meeting is moved to Thursday",
                "Got it, updating my calendar",
                "Do we have the latest deck ready?",
                "I'm finishing the slides now, will share by EOD",
                "Make sure to include the Q3 numbers",
                "Already on it 👍",
                "Great teamwork everyone",
                "Also, standup is at 10am tomorrow",
                "Will there be a remote option?",
                "Yes, same Zoom link as always",
            ],
        ),
        GroupDefinition(
            name="Book Club 📚",
            members=[
                _member(user_id, user_name),
                _member("lisa_j", "Lisa Johnson", True),
                _member("karen_w", "Karen White"),
                _member("carol_w2", "Carol Williams"),
            ],
            flow=[
                "Just finished Chapter 12! No spoilers please",
                "Oh you're going to love the ending",
                "The character development in this one is incredible",
                "I cried at the part with the letter 😭",
                "Same! So beautifully written",
                "Should we pick the next book?",
                "I vote for something lighter this time",
                "How about a mystery novel?",
            ],
        ),
        GroupDefinition(
            name="Weekend Hikers 🥾",
            members=[
                _member(user_id, user_name, True),
                _member("jack_b", "Jack Black"),
                _member("joe_s", "Joe Smith"),
                _member("frank_m", "Frank Miller"),
                _member("david_b", "David Brown"),
                _member("alice_j", "Alice Johnson"),
                _member("bob_s", "Bob Smith"),
                _member("eve_d", "Eve Davis"),
            ],
            flow=[
                "Trail suggestion for this Saturday?",
                "How about Eagle Peak? 8 miles roundtrip",
                "I've done that one, it's beautiful!",
                "What's the elevation gain?",
                "About 2,000 feet. Moderate difficulty",
                "I'm in! What time do we meet?",
                "7am at the trailhead parking lot?",
                "Early but worth it for the sunrise views 🌄",
                "Don't forget to bring plenty of water",
                "And sunscreen! I got burned last time 😅",
                "I'll bring trail mix for everyone",
                "See you all Saturday morning!",
            ],
        ),
        GroupDefinition(
            name="Game Night 🎮",
            members=[
                _member(user_id, user_name),
                _member("jack_b", "Jack Black", True),
                _member("bob_s", "Bob Smith"),
                _member("frank_m", "Frank Miller"),
            ],
            flow=[
                "Game night this Friday?",
                "Absolutely! My place or yours?",
                "Let's do mine, I just got a new board game",
                "Which one?",
                "Wingspan! It's about birds, trust me it's fun",
                "I've heard great things about that one",
                "I'll bring snacks and drinks",
                "See you at 7!",
            ],
        ),
    ]


def build_direct_messages(
    thread: Thread, now: datetime, rng: random.Random, user_id: str = "me", user_name: str = "Me"
) -> list[Message]:
    """Five to ten messages, ten minutes apart, ending just before now."""
    count = rng.randint(5, 10)
    messages = []
    for i in range(count):
        is_outgoing = rng.random() < 0.5

        reactions = []
        if i in (2, 5):
            reactions.append(Reaction(emoji="👍", reactor_id="user1", reactor_display_name="Alice"))
        if i == 5:
            reactions.append(Reaction(emoji="❤️", reactor_id="user2", reactor_display_name="Bob"))
            reactions.append(Reaction(emoji="😂", reactor_id="user3", reactor_display_name="Carol"))
        if i == 3:
            reactions.append(Reaction(emoji="❤️", reactor_id=user_id, reactor_display_name=user_name))

        messages.append(
            Message(
                sort_key=i + 1,
                timestamp=now - timedelta(seconds=(count - i) * 600),
                body_text=DIRECT_CONVERSATION[i % len(DIRECT_CONVERSATION)],
                is_outgoing=is_outgoing,
                delivery_status=(
                    rng.choice([DeliveryStatus.SENT, DeliveryStatus.DELIVERED, DeliveryStatus.READ])
                    if is_outgoing
                    else DeliveryStatus.SENT
                ),
                author_id=user_id if is_outgoing else thread.id,
                author_display_name=user_name if is_outgoing else thread.display_name,
                reactions=tuple(reactions),
            )
        )
    return messages


def _added_text(admin_name: str, others: list[GroupMember]) -> str:
    names = [m.first_name for m in others[:3]]
    if len(names) > 2:
        return f"{admin_name} added {names[0]}, {names[1]}, and {len(names) - 2} others"
    return f"{admin_name} added {' and '.join(names)}"


def build_group_messages(
    group: GroupDefinition, now: datetime, user_id: str = "me", user_name: str = "Me"
) -> list[Message]:
    """System notices followed by the group's scripted conversation.

    The flow starts at sort_key 10 with messages seven minutes apart; every
    fourth message starting at the third is from the local user.
    """
    others = [m for m in group.members if m.id != user_id]
    admin = next((m for m in group.members if m.is_admin), None)
    admin_name = admin.name if admin else "Someone"
    created_at = now - timedelta(hours=24)

    messages = [
        Message(
            sort_key=1,
            timestamp=created_at,
            body_text=f"{admin_name} created this group",
            is_outgoing=False,
            author_id=SYSTEM_AUTHOR_ID,
            is_system_message=True,
        ),
        Message(
            sort_key=2,
            timestamp=created_at + timedelta(seconds=30),
            body_text=_added_text(admin_name, others),
            is_outgoing=False,
            author_id=SYSTEM_AUTHOR_ID,
            is_system_message=True,
        ),
    ]

    flow = group.flow
    for i, text in enumerate(flow):
        is_outgoing = i % 4 == 2
        sender = _member(user_id, user_name) if is_outgoing else others[i % len(others)]

        reactions = []
        if i == 0:
            for offset, emoji in ((1, "👍"), (2, "❤️")):
                reactor = others[(i + offset) % len(others)]
                reactions.append(
                    Reaction(emoji=emoji, reactor_id=reactor.id, reactor_display_name=reactor.name)
                )
        if i == len(flow) - 1 and not is_outgoing:
            reactions.append(Reaction(emoji="👍", reactor_id=user_id, reactor_display_name=user_name))
        if i == 3 and not is_outgoing:
            reactor = others[(i + 1) % len(others)]
            reactions.append(
                Reaction(emoji="😂", reactor_id=reactor.id, reactor_display_name=reactor.name)
            )
            reactions.append(Reaction(emoji="😂", reactor_id=user_id, reactor_display_name=user_name))

        messages.append(
            Message(
                sort_key=10 + i,
                timestamp=now - timedelta(seconds=(len(flow) - i) * 420),
                body_text=text,
                is_outgoing=is_outgoing,
                delivery_status=DeliveryStatus.READ if is_outgoing else DeliveryStatus.SENT,
                author_id=sender.id,
                author_display_name=sender.name,
                reactions=tuple(reactions),
            )
        )
    return messages


def load_seed_data(
    environment: MessagingEnvironment,
    rng: Optional[random.Random] = None,
    user_name: str = "Me",
) -> int:
    """Populate an environment with the demo threads and messages.

    Threads are added in list order: the ten contacts, the five groups, then
    Note to Self. Timestamps are relative to the environment's clock.

    Args:
        environment: Environment to fill.
        rng: Random source; pass a seeded one for reproducible data.
        user_name: Display name of the local user.

    Returns:
        Number of threads added.
    """
    rng = rng or random.Random()
    now = environment.now
    user_id = environment.user_id
    threads = environment.threads
    conversations = environment.conversations
    existing = threads.thread_count

    for i, name in enumerate(CONTACTS):
        unread = i % 3 == 0
        thread = Thread(
            display_name=name,
            has_unread_messages=unread,
            unread_count=rng.randint(1, 10) if unread else 0,
            last_message_date=now - timedelta(hours=i),
            last_message_snippet=DirectMessageSnippet(
                message_text=CONTACT_SNIPPETS[i % len(CONTACT_SNIPPETS)]
            ),
            last_message_status=rng.choice(
                [MessageStatus.SENT, MessageStatus.DELIVERED, MessageStatus.READ]
            ),
        )
        threads.add_thread(thread)
        conversations.set_messages(
            thread.id, build_direct_messages(thread, now, rng, user_id, user_name)
        )

    for i, group in enumerate(group_definitions(user_id, user_name)):
        others = [m for m in group.members if m.id != user_id]
        last_sender = rng.choice(others)
        thread = Thread(
            display_name=group.name,
            is_group=True,
            is_pinned=group.is_pinned,
            is_muted=group.is_muted,
            has_unread_messages=i in (0, 3),
            unread_count={0: 5, 3: 12}.get(i, 0),
            last_message_date=now - timedelta(seconds=(i * 2 + 1) * 1800),
            last_message_snippet=GroupMessageSnippet(
                message_text=GROUP_SNIPPETS[i % len(GROUP_SNIPPETS)],
                sender_name=last_sender.first_name,
            ),
            member_count=len(group.members),
            participant_names=tuple(m.name for m in others),
        )
        threads.add_thread(thread, members=group.members)
        conversations.set_messages(
            thread.id, build_group_messages(group, now, user_id, user_name)
        )

    note = Thread(
        display_name="Note to Self",
        last_message_date=now - timedelta(days=1),
        last_message_snippet=DraftSnippet(draft_text=NOTE_TO_SELF_DRAFT),
        is_note_to_self=True,
    )
    threads.add_thread(note)
    conversations.set_messages(
        note.id, build_direct_messages(note, now, rng, user_id, user_name)
    )

    logger.info(f"Loaded seed data: {threads.thread_count} threads")
    return threads.thread_count - existing
