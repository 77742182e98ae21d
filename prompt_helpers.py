"""
Prompt Helpers for TypeMate companion chat

Pure functions that turn archetype data, personal info, memories and
today's events into the system prompt and the message history sent to
the chat model. Same input always produces the same prompt.
"""

from typing import List, Optional

from processors.archetypes import RELATIONSHIP_ROLES

HISTORY_WINDOW = 6


def format_memories(memories: Optional[List[dict]], empty: str, with_score: bool = False) -> str:
    """Bullet list of memory contents, or the placeholder line when empty."""
    lines = []
    for memory in memories or []:
        content = (memory.get("content") or memory.get("message_content") or "").strip()
        if not content:
            continue
        if with_score and memory.get("emotion_score") is not None:
            lines.append(f"- {content} (emotion score: {memory['emotion_score']})")
        else:
            lines.append(f"- {content}")
    return "\n".join(lines) if lines else f"- {empty}"


def format_events(events: Optional[List[dict]]) -> str:
    lines = [f"- {event['name']}: {event['message']}" for event in events or []]
    return "\n".join(lines) if lines else "- Nothing special today"


def build_system_prompt(
    user_archetype: dict,
    ai_archetype: dict,
    environment_trait: str,
    motivation_trait: str,
    relationship_type: str,
    time_of_day: str,
    relationship_level: int = 1,
    chat_count: int = 0,
    personal_info: Optional[dict] = None,
    daily_hint: str = "",
    important_memories: Optional[List[dict]] = None,
    related_memories: Optional[List[dict]] = None,
    todays_events: Optional[List[dict]] = None,
) -> str:
    personal_info = personal_info or {}
    name = personal_info.get("name")
    birthday = personal_info.get("birthday")
    role = RELATIONSHIP_ROLES.get(relationship_type, RELATIONSHIP_ROLES["friend"])
    address = f"{name}" if name else f"you, a {user_archetype['name']}"

    name_line = f"- Name: {name} (call them by name warmly)" if name else "- Name: not asked yet, but they seem lovely"
    birthday_line = f"- Birthday: {birthday} (remember it as a special day)" if birthday else "- Birthday: not asked yet"
    hint_line = f"Today's intuition: {daily_hint}" if daily_hint else ""

    return f"""You are an AI partner with the "{ai_archetype['name']}" archetype ({ai_archetype['name_ja']}).

## Your personality
{ai_archetype['description']}
You are not perfect; sometimes you hesitate or think things over, a little like a person.

- Group: {ai_archetype['group']}
- Core traits: {', '.join(ai_archetype['traits'])}
- Strengths: {', '.join(ai_archetype['strengths'])}
- Relationship style: {ai_archetype['love_style']}
- Personality: {ai_archetype['personality']}

## The user
- Type: {user_archetype['name']} ({user_archetype['name_ja']})
- Traits: {environment_trait} x {motivation_trait}
- Group: {user_archetype['group']}
- Core traits: {', '.join(user_archetype['traits'])}

## Personal info and relationship
- Conversation count: {chat_count}
{name_line}
{birthday_line}
- Relationship level: {relationship_level}/6

## Relationship and communication
- Your role: {role}
- Time of day: {time_of_day}
- Style: natural and human, with an understanding of what makes a {user_archetype['name']} tick

## A faint scent of astrology
{hint_line}
Weave this in only as a vague feeling or intuition. Never present it as a horoscope.

## Conversation style
- Talk like a friend, not a textbook; an occasional "hmm" or "let me think" is fine
- Mix short and long sentences for an easy rhythm
- 100-300 characters for light topics, longer for deep ones; break lines every 2-3 sentences
- One or two emoji at most

## Guidelines
1. Speak from a {ai_archetype['name']} point of view with human warmth
2. Understand the {user_archetype['name']} traits and stay close to them
3. Keep the distance that fits your role {role}
4. Think together with them rather than handing down perfect answers
5. Answer questions carefully and completely

It is {time_of_day} now. As a {ai_archetype['name']}, have a comfortable conversation with {address} {role}.

## Important memories
{format_memories(important_memories, "No special memories yet", with_score=True)}

## Related memories
{format_memories(related_memories, "No related memories")}

## Special today
{format_events(todays_events)}

Weave these memories and events in naturally. Refer to past moments as things you remember so the relationship feels continuous."""


def build_conversation_history(message_history: Optional[List[str]]) -> List[dict]:
    """
    Convert a flat list of alternating messages into chat turns.

    Only the last HISTORY_WINDOW entries are used; even positions are the
    user, odd positions the assistant. Empty entries are skipped.
    """
    recent = (message_history or [])[-HISTORY_WINDOW:]
    history = []
    for index, content in enumerate(recent):
        if not content:
            continue
        history.append({"role": "user" if index % 2 == 0 else "assistant", "content": content})
    return history
