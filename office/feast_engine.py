"""Moveable feasts of the 1662 Prayer Book calendar. No external dependencies."""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, timedelta


# ── Offsets from Easter Day (calendrical constants) ──────────────────

SEPTUAGESIMA_OFFSET = -63
SEXAGESIMA_OFFSET = -56
QUINQUAGESIMA_OFFSET = -49
ASH_WEDNESDAY_OFFSET = -46
PALM_SUNDAY_OFFSET = -7
GOOD_FRIDAY_OFFSET = -2
EASTER_MONDAY_OFFSET = 1
ASCENSION_OFFSET = 39
WHITSUNDAY_OFFSET = 49
WHIT_MONDAY_OFFSET = 50
TRINITY_SUNDAY_OFFSET = 56

ST_ANDREWS_DAY = (11, 30)


# ── Core computations ────────────────────────────────────────────────

def compute_easter(year: int) -> date:
    """Return Easter Day for the given Gregorian year.

    Uses the anonymous Gregorian algorithm (Meeus/Jones/Butcher), which is
    closed-form integer arithmetic valid for every Gregorian year.
    """
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31  # 3 = March, 4 = April
    day = ((h + l - 7 * m + 114) % 31) + 1
    return date(year, month, day)


def compute_advent_sunday(year: int) -> date:
    """Advent Sunday: the Sunday nearest St Andrew's Day (30 November).

    Always falls between 27 November and 3 December inclusive.
    """
    st_andrew = date(year, *ST_ANDREWS_DAY)
    days_after_sunday = st_andrew.isoweekday() % 7  # Sun=0, Mon=1 ... Sat=6
    if days_after_sunday <= 3:
        return st_andrew - timedelta(days=days_after_sunday)
    return st_andrew + timedelta(days=7 - days_after_sunday)


# ── Result dataclass ─────────────────────────────────────────────────

@dataclass(frozen=True)
class MoveableFeasts:
    septuagesima: date
    sexagesima: date
    quinquagesima: date
    ash_wednesday: date
    palm_sunday: date
    good_friday: date
    easter_day: date
    easter_monday: date
    ascension_day: date
    whitsunday: date
    whit_monday: date
    trinity_sunday: date
    advent_sunday: date
    christmas_day: date
    epiphany: date

    def to_dict(self) -> dict[str, date]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def compute_moveable_feasts(year: int) -> MoveableFeasts:
    """Derive every moveable date of the year from Easter Day.

    Advent Sunday is computed independently of Easter; Christmas Day and the
    Epiphany are fixed but carried here so season rules can use one record.
    """
    easter = compute_easter(year)

    def offset(days: int) -> date:
        return easter + timedelta(days=days)

    return MoveableFeasts(
        septuagesima=offset(SEPTUAGESIMA_OFFSET),
        sexagesima=offset(SEXAGESIMA_OFFSET),
        quinquagesima=offset(QUINQUAGESIMA_OFFSET),
        ash_wednesday=offset(ASH_WEDNESDAY_OFFSET),
        palm_sunday=offset(PALM_SUNDAY_OFFSET),
        good_friday=offset(GOOD_FRIDAY_OFFSET),
        easter_day=easter,
        easter_monday=offset(EASTER_MONDAY_OFFSET),
        ascension_day=offset(ASCENSION_OFFSET),
        whitsunday=offset(WHITSUNDAY_OFFSET),
        whit_monday=offset(WHIT_MONDAY_OFFSET),
        trinity_sunday=offset(TRINITY_SUNDAY_OFFSET),
        advent_sunday=compute_advent_sunday(year),
        christmas_day=date(year, 12, 25),
        epiphany=date(year, 1, 6),
    )
