"""The 30-day psalter of the 1662 Book of Common Prayer."""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

from .schemas import ReadingRef

PSALMS_BOOK = "Psalms"
VENITE_PSALM = 95
DIVIDED_PSALM = 119
SESSIONS = ("morning", "evening")


@dataclass(frozen=True)
class PsalterDay:
    day: int
    morning: tuple[int, ...]
    evening: tuple[int, ...]


@dataclass(frozen=True)
class VerseRange:
    start_verse: int
    end_verse: int


# Day 24 evening, 25 and 26 carry 119; see PSALM_119_DIVISIONS for the verses.
PSALTER_30_DAY: tuple[PsalterDay, ...] = (
    PsalterDay(1, (1, 2, 3, 4, 5), (6, 7, 8)),
    PsalterDay(2, (9, 10, 11), (12, 13, 14)),
    PsalterDay(3, (15, 16, 17), (18,)),
    PsalterDay(4, (19, 20, 21), (22, 23)),
    PsalterDay(5, (24, 25, 26), (27, 28, 29)),
    PsalterDay(6, (30, 31), (32, 33, 34)),
    PsalterDay(7, (35, 36), (37,)),
    PsalterDay(8, (38, 39, 40), (41, 42, 43)),
    PsalterDay(9, (44, 45, 46), (47, 48, 49)),
    PsalterDay(10, (50, 51, 52), (53, 54, 55)),
    PsalterDay(11, (56, 57, 58), (59, 60, 61)),
    PsalterDay(12, (62, 63, 64), (65, 66, 67)),
    PsalterDay(13, (68,), (69, 70)),
    PsalterDay(14, (71, 72), (73, 74)),
    PsalterDay(15, (75, 76, 77), (78,)),
    PsalterDay(16, (79, 80, 81), (82, 83, 84, 85)),
    PsalterDay(17, (86, 87, 88), (89,)),
    PsalterDay(18, (90, 91, 92), (93, 94)),
    PsalterDay(19, (95, 96, 97), (98, 99, 100, 101)),
    PsalterDay(20, (102, 103), (104,)),
    PsalterDay(21, (105,), (106,)),
    PsalterDay(22, (107,), (108, 109)),
    PsalterDay(23, (110, 111, 112, 113), (114, 115)),
    PsalterDay(24, (116, 117, 118), (119,)),
    PsalterDay(25, (119,), (119,)),
    PsalterDay(26, (119,), (119,)),
    PsalterDay(27, (120, 121, 122, 123, 124, 125), (126, 127, 128, 129, 130, 131)),
    PsalterDay(28, (132, 133, 134, 135), (136, 137, 138)),
    PsalterDay(29, (139, 140, 141), (142, 143)),
    PsalterDay(30, (144, 145, 146), (147, 148, 149, 150)),
)

# Psalm 119 (176 verses) over three evenings and two mornings:
#   24 evening  i-iv       25 morning  v-ix      25 evening  x-xiii
#   26 morning  xiv-xviii  26 evening  xix-xxii
PSALM_119_DIVISIONS: dict[str, VerseRange] = {
    "24-evening": VerseRange(1, 32),
    "25-morning": VerseRange(33, 72),
    "25-evening": VerseRange(73, 104),
    "26-morning": VerseRange(105, 144),
    "26-evening": VerseRange(145, 176),
}


def _check_session(session: str) -> str:
    if session not in SESSIONS:
        raise ValueError(f"Unsupported psalter session: {session}")
    return session


def get_psalter_day_number(day: date) -> int:
    """Cycle day (1-30) for a date.

    Day 31 of any month reads day 30, and so does the last day of February
    (28th or 29th), so that the cycle restarts on the 1st of March.
    """
    if day.month == 2 and day.day == calendar.monthrange(day.year, 2)[1]:
        return 30
    return min(day.day, 30)


def get_psalms_for_day(day: date, session: str) -> list[int]:
    entry = PSALTER_30_DAY[get_psalter_day_number(day) - 1]
    if _check_session(session) == "morning":
        return list(entry.morning)
    return list(entry.evening)


def should_omit_venite(day: date) -> bool:
    """Psalm 95 is already among the psalms of day 19, so the Venite is not said twice."""
    return get_psalter_day_number(day) == 19


def get_psalm_119_division(cycle_day: int, session: str) -> VerseRange | None:
    return PSALM_119_DIVISIONS.get(f"{cycle_day}-{_check_session(session)}")


def psalm_refs_for_day(day: date, session: str) -> list[ReadingRef]:
    """Appointed psalms as references, with Psalm 119 cut to its portion."""
    cycle_day = get_psalter_day_number(day)
    refs: list[ReadingRef] = []
    for number in get_psalms_for_day(day, session):
        division = get_psalm_119_division(cycle_day, session) if number == DIVIDED_PSALM else None
        refs.append(
            ReadingRef(
                book=PSALMS_BOOK,
                start_chapter=number,
                start_verse=division.start_verse if division else None,
                end_chapter=number,
                end_verse=division.end_verse if division else None,
            )
        )
    return refs
