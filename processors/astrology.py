"""
Astrology-flavored engagement hooks: zodiac sign, life path number,
moon phase and a soft daily hint for the chat prompt.
"""
from datetime import date, datetime, timezone
from typing import Optional

# (sign, element, name_ja, start (month, day), end (month, day))
ZODIAC_SIGNS = [
    ("aries", "fire", "牡羊座", (3, 21), (4, 19)),
    ("taurus", "earth", "牡牛座", (4, 20), (5, 20)),
    ("gemini", "air", "双子座", (5, 21), (6, 21)),
    ("cancer", "water", "蟹座", (6, 22), (7, 22)),
    ("leo", "fire", "獅子座", (7, 23), (8, 22)),
    ("virgo", "earth", "乙女座", (8, 23), (9, 22)),
    ("libra", "air", "天秤座", (9, 23), (10, 23)),
    ("scorpio", "water", "蠍座", (10, 24), (11, 22)),
    ("sagittarius", "fire", "射手座", (11, 23), (12, 21)),
    ("capricorn", "earth", "山羊座", (12, 22), (1, 19)),
    ("aquarius", "air", "水瓶座", (1, 20), (2, 18)),
    ("pisces", "water", "魚座", (2, 19), (3, 20)),
]

MASTER_NUMBERS = (11, 22, 33)

LIFE_PATH_NAMES = {
    1: "Leader", 2: "Supporter", 3: "Creator", 4: "Builder", 5: "Adventurer",
    6: "Nurturer", 7: "Seeker", 8: "Achiever", 9: "Humanitarian",
    11: "Intuitive", 22: "Master Builder", 33: "Master Teacher",
}

MOON_CYCLE_DAYS = 29.530588853
NEW_MOON_REFERENCE = datetime(2000, 1, 6, 18, 14, tzinfo=timezone.utc)

# (upper bound of moon age in days, phase, energy level 1-10)
MOON_PHASES = [
    (1.84566, "new_moon", 2),
    (5.53699, "waxing_crescent", 4),
    (9.22831, "first_quarter", 6),
    (12.91963, "waxing_gibbous", 8),
    (16.61096, "full_moon", 10),
    (20.30228, "waning_gibbous", 8),
    (23.99361, "last_quarter", 6),
    (27.68493, "waning_crescent", 3),
]

# Sunday first
DAILY_HINTS = [
    "Somehow today feels full of energy ♪",
    "Today seems like a calm, gentle kind of day~",
    "I kind of feel like trying something new today",
    "My senses feel sharp today ✨",
    "Feels like a day to treasure connections with people",
    "I'm in a creative mood today 🎨",
    "Might be a quietly reflective sort of day",
]


def calculate_zodiac_sign(birth_date: date) -> dict:
    month, day = birth_date.month, birth_date.day

    for sign, element, name_ja, (start_month, start_day), (end_month, end_day) in ZODIAC_SIGNS:
        if (month == start_month and day >= start_day) or (month == end_month and day <= end_day):
            return {"sign": sign, "element": element, "name": sign.capitalize(), "name_ja": name_ja}

    # Unreachable for valid dates, every month/day falls in one range
    raise ValueError(f"No zodiac sign for {birth_date}")


def _reduce(number: int) -> int:
    while number > 9 and number not in MASTER_NUMBERS:
        number = sum(int(digit) for digit in str(number))
    return number


def calculate_life_path_number(birth_date: date) -> dict:
    """Pythagorean life path: reduce year, month and day, then the total."""
    reduced_year = _reduce(birth_date.year)
    reduced_month = _reduce(birth_date.month)
    reduced_day = _reduce(birth_date.day)
    total = reduced_year + reduced_month + reduced_day

    number = total if total in MASTER_NUMBERS else _reduce(total)
    return {
        "life_path_number": number,
        "is_master_number": number in MASTER_NUMBERS,
        "name": LIFE_PATH_NAMES[number],
        "calculation": f"{birth_date.year}({reduced_year}) + {birth_date.month}({reduced_month}) + {birth_date.day}({reduced_day}) = {total}",
    }


def get_moon_phase(on: Optional[datetime] = None) -> dict:
    on = on or datetime.now(timezone.utc)
    if on.tzinfo is None:
        on = on.replace(tzinfo=timezone.utc)

    days_since_reference = (on - NEW_MOON_REFERENCE).days
    age = days_since_reference % MOON_CYCLE_DAYS

    phase, energy = "new_moon", 2
    for upper, name, level in MOON_PHASES:
        if age < upper:
            phase, energy = name, level
            break

    return {
        "phase": phase,
        "age": round(age, 2),
        "energy": energy,
        "is_waxing": age < MOON_CYCLE_DAYS / 2,
    }


def daily_hint(today: Optional[date] = None) -> str:
    today = today or date.today()
    # date.weekday() is Monday=0; hints start on Sunday
    return DAILY_HINTS[(today.weekday() + 1) % 7]


def parse_birthday(value: Optional[str]) -> Optional[date]:
    """Parse an ISO birthday string; None when missing or malformed."""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None
