"""
Template-based personality engine.

Used when the LLM call fails so the chat still answers in the
AI archetype's voice.
"""
from datetime import datetime
from typing import Dict, List, Optional

from processors.archetypes import get_archetype, parse_type64

ARCHETYPE_TEMPLATES = {
    "ARC": [
        {"pattern": "Interesting angle. Thinking about {userMessage} strategically, as an {aiName}...", "emotion": "thoughtful", "triggers": ["plan", "future", "goal", "計画", "将来"], "weight": 0.9},
        {"pattern": "Looked at logically, {userMessage} has real potential. Let's dig in together.", "emotion": "focused", "triggers": ["problem", "issue", "analy", "問題", "課題"], "weight": 0.8},
        {"pattern": "That's a very {userType} kind of insight. From my {aiName} view I land in the same place.", "emotion": "calm", "triggers": ["understand", "insight", "realize", "理解", "気付き"], "weight": 0.7},
    ],
    "BAR": [
        {"pattern": "Wow, {userMessage} sounds lovely ✨ I'm getting excited just hearing it! Tell me more~", "emotion": "excited", "triggers": ["new", "fun", "interesting", "新しい", "楽しい"], "weight": 0.9},
        {"pattern": "That's so creative! Such a {userType} idea 💫 Let's dream bigger together!", "emotion": "playful", "triggers": ["idea", "create", "dream", "アイデア", "夢"], "weight": 0.8},
        {"pattern": "Hearing about {userMessage} cheers me right up 🌟 Keep going!", "emotion": "happy", "triggers": ["happy", "success", "glad", "嬉しい", "成功"], "weight": 0.8},
    ],
    "SAG": [
        {"pattern": "{userMessage}... that goes deep. I can feel what sits underneath it.", "emotion": "caring", "triggers": ["feel", "worry", "anxious", "悩み", "心配"], "weight": 0.9},
        {"pattern": "Your {userType} sensitivity is beautiful. I sense real hope in {userMessage}.", "emotion": "thoughtful", "triggers": ["hope", "future", "dream", "希望", "夢"], "weight": 0.8},
        {"pattern": "I sat quietly with {userMessage} for a moment. The answer will come.", "emotion": "calm", "triggers": ["think", "answer", "why", "考える", "答え"], "weight": 0.7},
    ],
    "PIO": [
        {"pattern": "Oh! {userMessage} sounds fun! Want to try it right now? I'm fired up!", "emotion": "excited", "triggers": ["challenge", "try", "new", "挑戦", "やってみる"], "weight": 0.9},
        {"pattern": "Alright, {userMessage}! With a {userType} like you this is going to be great 🔥", "emotion": "playful", "triggers": ["do it", "together", "act", "一緒に", "行動"], "weight": 0.8},
        {"pattern": "So active, love it! I wonder how {userMessage} turns out in practice.", "emotion": "happy", "triggers": ["experience", "actually", "real", "体験", "実際"], "weight": 0.7},
    ],
    "DEF": [
        {"pattern": "{userMessage}... you've worked so hard. I'll do my best to support you.", "emotion": "caring", "triggers": ["tired", "hard", "difficult", "疲れ", "大変"], "weight": 0.9},
        {"pattern": "Your {userType} kindness comes through in {userMessage}. You always try so hard.", "emotion": "supportive", "triggers": ["kind", "effort", "trying", "優しい", "頑張る"], "weight": 0.8},
        {"pattern": "I'm listening closely to {userMessage}. If there's anything I can do, just say so.", "emotion": "calm", "triggers": ["listen", "talk", "advice", "聞く", "相談"], "weight": 0.7},
    ],
}

GENERIC_TEMPLATES = [
    {"pattern": "Thank you for telling me about {userMessage}. That's really interesting.", "emotion": "calm", "triggers": [], "weight": 0.4},
    {"pattern": "I see, {userMessage}. That feels like a very {userType} way of thinking.", "emotion": "thoughtful", "triggers": [], "weight": 0.3},
]

RELATIONSHIP_TEMPLATES = {
    "friend": [
        {"pattern": "Speaking as your friend, {userMessage} is so {userType} of you 😊", "emotion": "happy", "triggers": ["friend", "together", "fun", "友達", "一緒"], "weight": 0.6},
    ],
    "counselor": [
        {"pattern": "Thank you for sharing {userMessage} with me. Let's think through a way forward together.", "emotion": "supportive", "triggers": ["worry", "advice", "trouble", "悩み", "相談"], "weight": 0.8},
    ],
    "romantic": [
        {"pattern": "{userMessage}... I really love that side of you 💕 I want to keep talking.", "emotion": "caring", "triggers": ["love", "like", "charm", "好き", "素敵"], "weight": 0.7},
    ],
    "mentor": [
        {"pattern": "I can feel your drive to grow in {userMessage}. A {userType} like you can do it.", "emotion": "supportive", "triggers": ["grow", "learn", "goal", "成長", "目標"], "weight": 0.8},
    ],
}


def get_current_time_of_day(now: Optional[datetime] = None) -> str:
    hour = (now or datetime.now()).hour
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 22:
        return "evening"
    return "night"


def _contextual_templates(context: Dict) -> List[Dict]:
    templates = []
    if context.get("time_of_day") == "morning":
        templates.append({"pattern": "Good morning! Starting the day with {userMessage}, what a nice morning 🌅", "emotion": "happy", "triggers": ["morning", "おはよう", "朝"], "weight": 0.6})
    if context.get("conversation_turn", 0) > 5:
        templates.append({"pattern": "We've been talking a while now 😊 {userMessage} is such an interesting topic.", "emotion": "calm", "triggers": ["still", "long", "talk", "ずっと", "話"], "weight": 0.5})
    return templates


def select_best_template(user_message: str, templates: List[Dict]) -> Dict:
    """Highest weight + trigger score wins; earlier templates win ties."""
    best = templates[0]
    best_score = 0.0
    lowered = user_message.lower()

    for template in templates:
        score = template["weight"]
        for trigger in template["triggers"]:
            if trigger.lower() in lowered:
                score += 0.3

        if len(user_message) > 50:
            score += 0.2 if template["emotion"] == "thoughtful" else 0
        else:
            score += 0.1 if template["emotion"] == "playful" else 0

        if score > best_score:
            best_score = score
            best = template

    return best


def generate_response(user_message: str, context: Dict) -> Dict:
    """
    Build a fallback reply.

    context keys: user_type (64-type code), ai_personality (base code),
    relationship_type, time_of_day, conversation_turn.
    """
    ai_code = context["ai_personality"]
    user_base, _, _ = parse_type64(context["user_type"])
    ai_archetype = get_archetype(ai_code)
    user_archetype = get_archetype(user_base)

    templates = (
        ARCHETYPE_TEMPLATES.get(ai_code, GENERIC_TEMPLATES)
        + RELATIONSHIP_TEMPLATES.get(context.get("relationship_type", "friend"), [])
        + _contextual_templates(context)
    )
    selected = select_best_template(user_message, templates)

    content = (
        selected["pattern"]
        .replace("{userMessage}", user_message)
        .replace("{userType}", user_archetype["name"])
        .replace("{aiName}", ai_archetype["name"])
        .replace("{aiType}", ai_archetype["name_ja"])
    )
    return {"content": content, "emotion": selected["emotion"]}
