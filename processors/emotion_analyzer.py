"""
Keyword-based emotion scoring for a chat exchange.

Scores the user message and AI reply together. Intensity is on a 1-10
scale; 8 or more marks a special moment worth remembering.
"""
from typing import Dict, List

SPECIAL_MOMENT_THRESHOLD = 8

EMOTION_PATTERNS = {
    "happy": {
        "keywords": ["嬉しい", "楽しい", "素晴らしい", "最高", "やったー", "幸せ", "happy", "glad", "😊", "🌟"],
        "base_score": 7,
        "category": "positive",
    },
    "excited": {
        "keywords": ["ワクワク", "興奮", "すごい", "感動", "驚いた", "素敵", "amazing", "excited", "✨", "🎉"],
        "base_score": 8,
        "category": "positive",
    },
    "grateful": {
        "keywords": ["ありがとう", "感謝", "おかげで", "助かった", "支えて", "thanks", "thank you", "grateful"],
        "base_score": 9,
        "category": "positive",
    },
    "loving": {
        "keywords": ["愛してる", "大好き", "愛情", "大切", "特別", "心から", "永遠", "love you", "forever"],
        "base_score": 10,
        "category": "positive",
    },
    "caring": {
        "keywords": ["心配", "大丈夫", "支える", "寄り添", "思いやり", "温かい", "take care", "💕"],
        "base_score": 6,
        "category": "positive",
    },
    "sad": {
        "keywords": ["悲しい", "つらい", "困った", "大変", "泣きたい", "落ち込", "sad", "lonely", "😢"],
        "base_score": 3,
        "category": "negative",
    },
    "confused": {
        "keywords": ["わからない", "混乱", "困惑", "迷って", "confused", "?"],
        "base_score": 4,
        "category": "neutral",
    },
    "thoughtful": {
        "keywords": ["考える", "深い", "理解", "分析", "洞察", "思索", "wonder", "🤔"],
        "base_score": 5,
        "category": "neutral",
    },
}


def analyze_emotion_with_intensity(user_message: str, ai_response: str) -> Dict:
    """
    Pick the strongest matching emotion for an exchange.

    score = base_score + min(0.5 * matched keywords, 2), capped at 10.
    The first pattern reaching the highest score wins.
    """
    combined = f"{user_message} {ai_response}".lower()

    best = {"emotion": "calm", "intensity": 5, "category": "neutral", "keywords": []}
    max_score = 0.0

    for emotion, pattern in EMOTION_PATTERNS.items():
        matched: List[str] = [kw for kw in pattern["keywords"] if kw.lower() in combined]
        if not matched:
            continue

        score = pattern["base_score"] + min(len(matched) * 0.5, 2)
        if score > max_score:
            max_score = score
            best = {
                "emotion": emotion,
                "intensity": min(score, 10),
                "category": pattern["category"],
                "keywords": matched,
            }

    best["is_special_moment"] = best["intensity"] >= SPECIAL_MOMENT_THRESHOLD
    return best


def estimate_emotion(ai_response: str) -> str:
    """Emotion label for an AI reply on its own."""
    return analyze_emotion_with_intensity("", ai_response)["emotion"]
