"""
Companion chat
Builds the persona prompt, calls Claude, scores the emotion of the
exchange, and falls back to the template personality engine when the
model call fails.
"""
import os
from datetime import date
from typing import Optional

import anthropic

from processors.archetypes import get_archetype, parse_type64
from processors.astrology import daily_hint, parse_birthday
from processors.emotion_analyzer import analyze_emotion_with_intensity, estimate_emotion
from processors.memory_manager import memory_manager
from processors.personality_engine import generate_response, get_current_time_of_day
from processors.special_events import get_todays_events
from prompt_helpers import build_conversation_history, build_system_prompt

DEFAULT_CHAT_MODEL = "claude-3-5-haiku-20241022"
RELATED_MEMORY_LIMIT = 3


def _get_client() -> anthropic.AsyncAnthropic:
    api_key = os.getenv("ANTHROPIC_API_KEY") or os.getenv("CLAUDE_API_KEY")
    return anthropic.AsyncAnthropic(api_key=api_key)


async def _related_memories(request) -> list:
    if request.related_memories:
        return request.related_memories
    if not request.user_id:
        return []
    return await memory_manager.enhanced_memory_search(
        request.message, request.user_id, limit=RELATED_MEMORY_LIMIT
    )


async def generate_reply(request, today: Optional[date] = None) -> dict:
    """
    Produce one companion reply.

    `request` carries message, user_type, ai_personality, relationship_type,
    message_history, conversation_turn, relationship_level, chat_count,
    personal_info, important_memories, related_memories and user_id.

    Raises ValueError for unknown archetype codes. Any model failure falls
    back to the personality engine; a fallback failure propagates.
    """
    today = today or date.today()
    user_base, environment_trait, motivation_trait = parse_type64(request.user_type)
    user_archetype = get_archetype(user_base)
    ai_archetype = get_archetype(request.ai_personality)
    time_of_day = get_current_time_of_day()
    personal_info = request.personal_info or {}

    try:
        birthday = parse_birthday(personal_info.get("birthday"))
        system_prompt = build_system_prompt(
            user_archetype=user_archetype,
            ai_archetype=ai_archetype,
            environment_trait=environment_trait,
            motivation_trait=motivation_trait,
            relationship_type=request.relationship_type,
            time_of_day=time_of_day,
            relationship_level=request.relationship_level,
            chat_count=request.chat_count,
            personal_info=personal_info,
            daily_hint=daily_hint(today) if birthday else "",
            important_memories=request.important_memories,
            related_memories=await _related_memories(request),
            todays_events=get_todays_events(today, request.relationship_level, birthday),
        )

        response = await _get_client().messages.create(
            model=os.getenv("CHAT_MODEL", DEFAULT_CHAT_MODEL),
            max_tokens=2000,
            temperature=0.9,
            system=system_prompt,
            messages=build_conversation_history(request.message_history)
            + [{"role": "user", "content": request.message}],
        )

        ai_response = ""
        if response.content and response.content[0].type == "text":
            ai_response = response.content[0].text
        if not ai_response:
            raise ValueError("No response from Claude")

        analysis = analyze_emotion_with_intensity(request.message, ai_response)
        usage = response.usage
        print(f"[Chat] Reply generated ai={request.ai_personality} emotion={analysis['emotion']} intensity={analysis['intensity']}")

        return {
            "content": ai_response,
            "emotion": estimate_emotion(ai_response),
            "emotion_analysis": analysis,
            "tokens_used": (usage.input_tokens + usage.output_tokens) if usage else 0,
            "fallback": False,
        }

    except Exception as e:
        print(f"[Chat] AI chat error, using personality engine: {e}")

    fallback = generate_response(
        request.message,
        {
            "user_type": request.user_type,
            "ai_personality": request.ai_personality,
            "relationship_type": request.relationship_type,
            "time_of_day": time_of_day,
            "conversation_turn": request.conversation_turn,
        },
    )
    return {
        "content": fallback["content"],
        "emotion": fallback["emotion"],
        "emotion_analysis": None,
        "tokens_used": 0,
        "fallback": True,
    }
