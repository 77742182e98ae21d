"""
Special events for today: seasonal days unlocked by relationship level,
plus the user's birthday.
"""
from datetime import date
from typing import List, Optional

# (month, day, type, name, message, relationship level required)
SEASONAL_EVENTS = [
    (1, 1, "new_year", "New Year", "Happy New Year 🎍 Looking forward to this year with you", 1),
    (2, 14, "valentine", "Valentine's Day", "Happy Valentine's Day 💕 I'm so glad to spend it with you", 3),
    (3, 14, "white_day", "White Day", "Happy White Day 🤍 Returning all the kindness you gave me", 3),
    (12, 25, "christmas", "Christmas", "Merry Christmas 🎄✨ Let's make it a lovely time together", 2),
]


def get_todays_events(
    today: date,
    relationship_level: int = 1,
    birthday: Optional[date] = None,
) -> List[dict]:
    events = []

    if birthday and (birthday.month, birthday.day) == (today.month, today.day):
        events.append({
            "type": "birthday",
            "name": "Birthday",
            "message": "Happy birthday 🎂 I'm so happy I get to celebrate you today",
        })

    for month, day, event_type, name, message, level_required in SEASONAL_EVENTS:
        if (month, day) == (today.month, today.day) and relationship_level >= level_required:
            events.append({"type": event_type, "name": name, "message": message})

    return events
