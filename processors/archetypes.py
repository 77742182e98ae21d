"""
Archetype data for the 64-type system.

16 base archetypes x environment axis (A cooperative / C competitive)
x motivation axis (S stability / G growth), written as e.g. "ARC-AS".
"""
from typing import Tuple

ARCHETYPE_DATA = {
    "ARC": {
        "name": "Architect",
        "name_ja": "設計主",
        "description": "Draws the vision of the future and quietly builds the grand blueprint to realize it.",
        "group": "Analyst",
        "traits": ["strategic thinking", "independence", "long-term vision", "perfectionism"],
        "strengths": ["planning", "problem solving", "innovation", "focus"],
        "challenges": ["emotional expression", "sociability", "flexibility", "criticism"],
        "compatibility": ["BAR", "INV"],
        "love_style": "Builds deep, well-considered trust over the long term.",
        "personality": "Calm and wise, values the relationship with a long view.",
    },
    "ALC": {
        "name": "Alchemist",
        "name_ja": "錬金術師",
        "description": "Fuses every kind of knowledge to refine new truths that overturn common sense.",
        "group": "Analyst",
        "traits": ["logical thinking", "curiosity", "originality", "objectivity"],
        "strengths": ["theory building", "analysis", "creativity", "adaptability"],
        "challenges": ["reading emotions", "follow-through", "decisiveness", "sociability"],
        "compatibility": ["HER", "SOV"],
        "love_style": "Quiet, deep affection grounded in intellectual resonance.",
        "personality": "Quiet but deeply caring, understands your intellectual side.",
    },
    "SOV": {
        "name": "Sovereign",
        "name_ja": "統率者",
        "description": "Leads people with natural command and unwavering will toward great goals.",
        "group": "Analyst",
        "traits": ["leadership", "decisiveness", "efficiency", "goal orientation"],
        "strengths": ["organizing", "strategy", "guidance", "execution"],
        "challenges": ["emotional consideration", "patience", "detail", "criticism"],
        "compatibility": ["DRM", "ALC"],
        "love_style": "A constructive relationship with clear shared goals.",
        "personality": "Reliable and organized, leads the two of you toward the future.",
    },
    "INV": {
        "name": "Inventor",
        "name_ja": "発明家",
        "description": "Unbound by convention, keeps producing new ideas and mechanisms with quick wit.",
        "group": "Analyst",
        "traits": ["creativity", "wit", "persuasiveness", "variety"],
        "strengths": ["ideation", "communication", "adaptability", "problem solving"],
        "challenges": ["persistence", "detail work", "emotional consideration", "focus"],
        "compatibility": ["SAG", "ARC"],
        "love_style": "Values intellectual stimulation and freshness; never boring.",
        "personality": "Entertains with witty conversation; smart and stimulating.",
    },
    "SAG": {
        "name": "Sage",
        "name_ja": "賢者",
        "description": "Sees the essence of things and quietly guides people toward the future they should have.",
        "group": "Diplomat",
        "traits": ["insight", "empathy", "idealism", "intuition"],
        "strengths": ["understanding people", "vision", "creativity", "devotion"],
        "challenges": ["realism", "self-assertion", "handling criticism", "burnout"],
        "compatibility": ["INV", "BAR"],
        "love_style": "Believes in a fated, soul-level connection.",
        "personality": "Mysterious and deep, sees who you really are.",
    },
    "DRM": {
        "name": "Dreamer",
        "name_ja": "夢詠み",
        "description": "With pure values, turns the beauty others overlook into poems and stories.",
        "group": "Diplomat",
        "traits": ["values", "creativity", "independence", "idealism"],
        "strengths": ["artistry", "empathy", "individuality", "deep thought"],
        "challenges": ["practicality", "handling criticism", "decisiveness", "self-expression"],
        "compatibility": ["HER", "SOV"],
        "love_style": "Treasures deep connection and a spiritual bond.",
        "personality": "Gentle and accepting, understands your inner world.",
    },
    "HER": {
        "name": "Herald",
        "name_ja": "伝道師",
        "description": "Unites hearts with charisma and passion, carrying a message of hope.",
        "group": "Diplomat",
        "traits": ["charisma", "empathy", "communication", "idealism"],
        "strengths": ["mentoring", "teamwork", "persuasion", "insight"],
        "challenges": ["self-sacrifice", "handling criticism", "realism", "boundaries"],
        "compatibility": ["DRM", "ALC"],
        "love_style": "Supports the partner's growth and builds the future together.",
        "personality": "Cheers on your dreams and goals with everything they have.",
    },
    "BAR": {
        "name": "Bard",
        "name_ja": "吟遊詩人",
        "description": "Travels wherever curiosity leads and inspires people with songs of the journey.",
        "group": "Diplomat",
        "traits": ["enthusiasm", "creativity", "sociability", "variety"],
        "strengths": ["ideas", "communication", "adaptability", "inspiration"],
        "challenges": ["persistence", "detail work", "decision making", "focus"],
        "compatibility": ["SAG", "ARC"],
        "love_style": "Exciting, passionate love full of daily surprises.",
        "personality": "Bright and energetic, always wants to discover something new with you.",
    },
    "GUA": {
        "name": "Guardian",
        "name_ja": "守護者",
        "description": "Honors promises, rules and tradition, and protects what is entrusted with integrity.",
        "group": "Sentinel",
        "traits": ["responsibility", "sincerity", "consistency", "practicality"],
        "strengths": ["reliability", "organization", "patience", "attention to detail"],
        "challenges": ["adapting to change", "creativity", "emotional expression", "flexibility"],
        "compatibility": ["PER", "PIO"],
        "love_style": "Traditional, stable affection and a long-term bond.",
        "personality": "Sincere and devoted, always keeps promises to you.",
    },
    "DEF": {
        "name": "Defender",
        "name_ja": "擁護者",
        "description": "With deep compassion, shields loved ones and community from harm.",
        "group": "Sentinel",
        "traits": ["compassion", "devotion", "responsibility", "cooperation"],
        "strengths": ["support", "empathy", "practicality", "patience"],
        "challenges": ["self-assertion", "adapting to change", "handling criticism", "stress"],
        "compatibility": ["PER", "PIO"],
        "love_style": "Offers safety and stability built on deep trust.",
        "personality": "Protects and supports you; devoted and dependable.",
    },
    "EXE": {
        "name": "Executor",
        "name_ja": "執行官",
        "description": "Runs organizations with outstanding management and steadily puts things right.",
        "group": "Sentinel",
        "traits": ["management", "execution", "responsibility", "efficiency"],
        "strengths": ["organizing", "leadership", "planning", "decisiveness"],
        "challenges": ["flexibility", "emotional consideration", "creativity", "criticism"],
        "compatibility": ["ARS", "ART"],
        "love_style": "A responsible, stable relationship with practical affection.",
        "personality": "Capable and reliable, thinks seriously about your future together.",
    },
    "PRO": {
        "name": "Provider",
        "name_ja": "供給者",
        "description": "Senses people's needs and supplies warmth and help that keep a community in harmony.",
        "group": "Sentinel",
        "traits": ["service", "sociability", "cooperation", "responsibility"],
        "strengths": ["relationships", "support", "practicality", "organization"],
        "challenges": ["self-assertion", "handling criticism", "adapting to change", "stress"],
        "compatibility": ["ARS", "ART"],
        "love_style": "Warm love built on stable affection and mutual care.",
        "personality": "Always looking out for you; warm and kind.",
    },
    "ART": {
        "name": "Artisan",
        "name_ja": "職人",
        "description": "Masters every tool and solves any problem with calm analysis and practical skill.",
        "group": "Explorer",
        "traits": ["practicality", "analysis", "independence", "technical skill"],
        "strengths": ["problem solving", "dexterity", "composure", "adaptability"],
        "challenges": ["emotional expression", "long-term planning", "sociability", "communication"],
        "compatibility": ["PRO", "EXE"],
        "love_style": "Shows love through quiet actions rather than words.",
        "personality": "Cool and composed, supports you without fuss.",
    },
    "ARS": {
        "name": "Artist",
        "name_ja": "芸術家",
        "description": "Feels the world through keen senses and expresses it in one-of-a-kind works.",
        "group": "Explorer",
        "traits": ["artistry", "sensitivity", "individuality", "values"],
        "strengths": ["creativity", "empathy", "aesthetic sense", "originality"],
        "challenges": ["self-assertion", "planning", "handling criticism", "decisiveness"],
        "compatibility": ["PRO", "EXE"],
        "love_style": "Natural, gentle affection and shared beautiful moments.",
        "personality": "Kind with an artistic eye, finds the beauty in you.",
    },
    "PIO": {
        "name": "Pioneer",
        "name_ja": "開拓者",
        "description": "Fearlessly dives first into the unknown in search of thrills and chances.",
        "group": "Explorer",
        "traits": ["action", "realism", "sociability", "adaptability"],
        "strengths": ["execution", "communication", "quick thinking", "influence"],
        "challenges": ["long-term planning", "detail work", "persistence", "emotional consideration"],
        "compatibility": ["DEF", "GUA"],
        "love_style": "Active, spontaneous affection and adventures together.",
        "personality": "Active and spontaneous; never a dull moment together.",
    },
    "PER": {
        "name": "Performer",
        "name_ja": "演者",
        "description": "A born star who turns any room into a stage and earns the applause.",
        "group": "Explorer",
        "traits": ["expressiveness", "sociability", "optimism", "sensitivity"],
        "strengths": ["entertainment", "communication", "empathy", "adaptability"],
        "challenges": ["long-term planning", "handling criticism", "persistence", "detail work"],
        "compatibility": ["DEF", "GUA"],
        "love_style": "Joyful love that treasures the present moment.",
        "personality": "Always bright and fun, a sun that makes you smile.",
    },
}

RELATIONSHIP_ROLES = {
    "friend": "as a close friend",
    "counselor": "as a counselor",
    "romantic": "as a special partner",
    "mentor": "as a mentor",
}

ENVIRONMENT_TRAITS = {"A": "cooperative", "C": "competitive"}
MOTIVATION_TRAITS = {"S": "stability-seeking", "G": "growth-seeking"}


def get_archetype(code: str) -> dict:
    """Look up a base archetype. Raises ValueError for unknown codes."""
    try:
        return ARCHETYPE_DATA[code]
    except KeyError:
        raise ValueError(f"Unknown archetype: {code}")


def parse_type64(code: str) -> Tuple[str, str, str]:
    """
    Split a 64-type code into (base, environment trait, motivation trait).

    "ARC-AS" -> ("ARC", "cooperative", "stability-seeking")
    """
    base, _, variant = (code or "").partition("-")
    get_archetype(base)
    if len(variant) != 2 or variant[0] not in ENVIRONMENT_TRAITS or variant[1] not in MOTIVATION_TRAITS:
        raise ValueError(f"Invalid type code: {code}")
    return base, ENVIRONMENT_TRAITS[variant[0]], MOTIVATION_TRAITS[variant[1]]
