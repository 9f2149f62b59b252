"""Liturgical day resolution for the 1662 Prayer Book calendar.

A civil date is resolved in one direction only:
    moveable feasts -> season -> week of season -> holy-day precedence.

Season boundaries and holy-day precedence are both ordered rule tables so
each rule can be read, and tested, on its own.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable, Optional

from .feast_engine import MoveableFeasts, compute_moveable_feasts
from .psalter_engine import get_psalter_day_number

logger = logging.getLogger("office.calendar")


class LiturgicalSeason(str, Enum):
    ADVENT = "advent"
    CHRISTMAS = "christmas"
    EPIPHANY = "epiphany"
    PRE_LENT = "pre-lent"
    LENT = "lent"
    HOLY_WEEK = "holy-week"
    EASTER = "easter"
    ASCENSION = "ascension"
    WHITSUN = "whitsun"
    TRINITY = "trinity"


class HolyDayRank(str, Enum):
    PRINCIPAL = "principal"
    MAJOR = "major"
    MINOR = "minor"


SEASON_NAMES: dict[LiturgicalSeason, str] = {
    LiturgicalSeason.ADVENT: "Advent",
    LiturgicalSeason.CHRISTMAS: "Christmas",
    LiturgicalSeason.EPIPHANY: "Epiphany",
    LiturgicalSeason.PRE_LENT: "Pre-Lent",
    LiturgicalSeason.LENT: "Lent",
    LiturgicalSeason.HOLY_WEEK: "Holy Week",
    LiturgicalSeason.EASTER: "Easter",
    LiturgicalSeason.ASCENSION: "Ascensiontide",
    LiturgicalSeason.WHITSUN: "Whitsun",
    LiturgicalSeason.TRINITY: "Trinity",
}

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

ORDINALS = (
    "", "First", "Second", "Third", "Fourth", "Fifth", "Sixth", "Seventh",
    "Eighth", "Ninth", "Tenth", "Eleventh", "Twelfth", "Thirteenth", "Fourteenth",
    "Fifteenth", "Sixteenth", "Seventeenth", "Eighteenth", "Nineteenth", "Twentieth",
    "Twenty-first", "Twenty-second", "Twenty-third", "Twenty-fourth", "Twenty-fifth",
    "Twenty-sixth", "Twenty-seventh", "Twenty-eighth",
)

PRE_LENT_SUNDAYS = ("Septuagesima", "Sexagesima", "Quinquagesima")


# ── Holy days ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class HolyDay:
    name: str
    rank: HolyDayRank
    collect_id: str


@dataclass(frozen=True)
class FixedHolyDay(HolyDay):
    month: int
    day: int


@dataclass(frozen=True)
class MoveableHolyDay(HolyDay):
    feast: str  # attribute of MoveableFeasts


_P, _MA, _MI = HolyDayRank.PRINCIPAL, HolyDayRank.MAJOR, HolyDayRank.MINOR

FIXED_HOLY_DAYS: tuple[FixedHolyDay, ...] = (
    FixedHolyDay("St Andrew", _MA, "st-andrew", 11, 30),
    FixedHolyDay("St Thomas", _MI, "st-thomas", 12, 21),
    FixedHolyDay("Christmas Day", _P, "christmas", 12, 25),
    FixedHolyDay("St Stephen", _MI, "st-stephen", 12, 26),
    FixedHolyDay("St John the Evangelist", _MI, "st-john-evangelist", 12, 27),
    FixedHolyDay("Holy Innocents", _MI, "holy-innocents", 12, 28),
    FixedHolyDay("Circumcision", _P, "circumcision", 1, 1),
    FixedHolyDay("Epiphany", _P, "epiphany", 1, 6),
    FixedHolyDay("Conversion of St Paul", _MA, "conversion-st-paul", 1, 25),
    FixedHolyDay("Purification", _MA, "purification", 2, 2),
    FixedHolyDay("St Matthias", _MI, "st-matthias", 2, 24),
    FixedHolyDay("Annunciation", _MA, "annunciation", 3, 25),
    FixedHolyDay("St Mark", _MI, "st-mark", 4, 25),
    FixedHolyDay("SS Philip & James", _MI, "ss-philip-james", 5, 1),
    FixedHolyDay("St Barnabas", _MI, "st-barnabas", 6, 11),
    FixedHolyDay("Nativity of St John the Baptist", _MA, "nativity-john-baptist", 6, 24),
    FixedHolyDay("St Peter", _MA, "st-peter", 6, 29),
    FixedHolyDay("St James", _MI, "st-james", 7, 25),
    FixedHolyDay("St Bartholomew", _MI, "st-bartholomew", 8, 24),
    FixedHolyDay("St Matthew", _MI, "st-matthew", 9, 21),
    FixedHolyDay("Michaelmas", _MA, "michaelmas", 9, 29),
    FixedHolyDay("St Luke", _MI, "st-luke", 10, 18),
    FixedHolyDay("SS Simon & Jude", _MI, "ss-simon-jude", 10, 28),
    FixedHolyDay("All Saints' Day", _MA, "all-saints", 11, 1),
)

_FIXED_BY_MONTH_DAY: dict[tuple[int, int], FixedHolyDay] = {(hd.month, hd.day): hd for hd in FIXED_HOLY_DAYS}

MOVEABLE_HOLY_DAYS: tuple[MoveableHolyDay, ...] = (
    MoveableHolyDay("Easter Day", _P, "easter-day", "easter_day"),
    MoveableHolyDay("Ascension Day", _P, "ascension-day", "ascension_day"),
    MoveableHolyDay("Whitsunday", _P, "whitsunday", "whitsunday"),
    MoveableHolyDay("Trinity Sunday", _P, "trinity-sunday", "trinity_sunday"),
    MoveableHolyDay("Ash Wednesday", _MA, "ash-wednesday", "ash_wednesday"),
    MoveableHolyDay("Good Friday", _MA, "good-friday", "good_friday"),
    MoveableHolyDay("Palm Sunday", _MA, "palm-sunday", "palm_sunday"),
)


def find_fixed_holy_day(day: date) -> FixedHolyDay | None:
    return _FIXED_BY_MONTH_DAY.get((day.month, day.day))


def find_moveable_holy_day(day: date, feasts: MoveableFeasts) -> MoveableHolyDay | None:
    for holy_day in MOVEABLE_HOLY_DAYS:
        if getattr(feasts, holy_day.feast) == day:
            return holy_day
    return None


# ── Season rules ─────────────────────────────────────────────────────

Bound = Callable[[date, MoveableFeasts], date]


@dataclass(frozen=True)
class SeasonRule:
    season: LiturgicalSeason
    start: Bound
    end: Bound

    def matches(self, day: date, feasts: MoveableFeasts) -> bool:
        return self.start(day, feasts) <= day <= self.end(day, feasts)


def _eve(bound: Callable[[MoveableFeasts], date]) -> Bound:
    return lambda _day, feasts: bound(feasts) - timedelta(days=1)


# Every date is read against the feasts of its own civil year. Septuagesima
# never falls before 18 January, so a January date always closes Epiphany
# season on the same year's Septuagesima.
SEASON_RULES: tuple[SeasonRule, ...] = (
    SeasonRule(LiturgicalSeason.HOLY_WEEK, lambda _d, f: f.palm_sunday, _eve(lambda f: f.easter_day)),
    SeasonRule(LiturgicalSeason.LENT, lambda _d, f: f.ash_wednesday, _eve(lambda f: f.palm_sunday)),
    SeasonRule(LiturgicalSeason.PRE_LENT, lambda _d, f: f.septuagesima, _eve(lambda f: f.ash_wednesday)),
    SeasonRule(LiturgicalSeason.EASTER, lambda _d, f: f.easter_day, _eve(lambda f: f.ascension_day)),
    SeasonRule(LiturgicalSeason.ASCENSION, lambda _d, f: f.ascension_day, _eve(lambda f: f.whitsunday)),
    SeasonRule(LiturgicalSeason.WHITSUN, lambda _d, f: f.whitsunday, _eve(lambda f: f.trinity_sunday)),
    SeasonRule(LiturgicalSeason.TRINITY, lambda _d, f: f.trinity_sunday, _eve(lambda f: f.advent_sunday)),
    SeasonRule(LiturgicalSeason.ADVENT, lambda _d, f: f.advent_sunday, lambda d, _f: date(d.year, 12, 24)),
    SeasonRule(LiturgicalSeason.CHRISTMAS, lambda d, _f: date(d.year, 12, 25), lambda d, _f: date(d.year, 12, 31)),
    SeasonRule(LiturgicalSeason.CHRISTMAS, lambda d, _f: date(d.year, 1, 1), lambda d, _f: date(d.year, 1, 5)),
    SeasonRule(LiturgicalSeason.EPIPHANY, lambda _d, f: f.epiphany, _eve(lambda f: f.septuagesima)),
)

FALLBACK_SEASON = LiturgicalSeason.TRINITY


def _as_date(day: date) -> date:
    if isinstance(day, datetime):
        return day.date()
    return day


def match_season_rule(day: date, feasts: MoveableFeasts) -> SeasonRule | None:
    day = _as_date(day)
    for rule in SEASON_RULES:
        if rule.matches(day, feasts):
            return rule
    return None


def determine_season(day: date, feasts: MoveableFeasts) -> LiturgicalSeason:
    day = _as_date(day)
    rule = match_season_rule(day, feasts)
    if rule is None:
        logger.error("Season rules left a gap | date=%s | easter=%s", day.isoformat(), feasts.easter_day.isoformat())
        return FALLBACK_SEASON
    return rule.season


# ── Week of season ───────────────────────────────────────────────────

def _first_sunday_after(day: date) -> date:
    following = day + timedelta(days=1)
    return following + timedelta(days=(7 - following.isoweekday() % 7) % 7)


def _epiphany_week(day: date, feasts: MoveableFeasts) -> int:
    first_sunday = _first_sunday_after(feasts.epiphany)
    if day < first_sunday:
        return 0
    return (day - first_sunday).days // 7 + 1


_WEEK_RULES: dict[LiturgicalSeason, Callable[[date, MoveableFeasts], int]] = {
    LiturgicalSeason.ADVENT: lambda d, f: (d - f.advent_sunday).days // 7 + 1,
    LiturgicalSeason.EPIPHANY: _epiphany_week,
    LiturgicalSeason.PRE_LENT: lambda d, f: (d - f.septuagesima).days // 7 + 1,
    LiturgicalSeason.LENT: lambda d, f: (d - f.ash_wednesday).days // 7 + 1,
    LiturgicalSeason.EASTER: lambda d, f: (d - f.easter_day).days // 7 + 1,
    # Trinity Sunday is week 0; the First Sunday after Trinity opens week 1.
    LiturgicalSeason.TRINITY: lambda d, f: (d - f.trinity_sunday).days // 7,
}


def compute_week_of_season(day: date, season: LiturgicalSeason, feasts: MoveableFeasts) -> int:
    rule = _WEEK_RULES.get(season)
    if rule is None:
        return 1
    return rule(day, feasts)


# ── Names and collects ───────────────────────────────────────────────

def _ordinal(n: int) -> str:
    if 0 < n < len(ORDINALS):
        return ORDINALS[n]
    return f"{n}th"


def _sunday_name(season: LiturgicalSeason, week: int) -> str:
    if season is LiturgicalSeason.ADVENT:
        return f"The {_ordinal(week)} Sunday in Advent"
    if season is LiturgicalSeason.CHRISTMAS:
        # The Prayer Book appoints a single Sunday after Christmas Day.
        return "The Sunday after Christmas Day"
    if season is LiturgicalSeason.EPIPHANY:
        return f"The {_ordinal(week)} Sunday after the Epiphany"
    if season is LiturgicalSeason.PRE_LENT:
        return f"{PRE_LENT_SUNDAYS[min(max(week, 1), 3) - 1]} Sunday"
    if season is LiturgicalSeason.LENT:
        return f"The {_ordinal(week)} Sunday in Lent"
    if season is LiturgicalSeason.HOLY_WEEK:
        return "The Sunday next before Easter"
    if season is LiturgicalSeason.EASTER:
        return "Easter Day" if week <= 1 else f"The {_ordinal(week - 1)} Sunday after Easter"
    if season is LiturgicalSeason.ASCENSION:
        return "The Sunday after Ascension Day"
    if season is LiturgicalSeason.WHITSUN:
        return "Whitsunday"
    if week == 0:
        return "Trinity Sunday"
    return f"The {_ordinal(week)} Sunday after Trinity"


def format_day_name(day: date, season: LiturgicalSeason, week: int) -> str:
    day_of_week = day.isoweekday() % 7
    if day_of_week == 0:
        return _sunday_name(season, week)

    weekday = DAY_NAMES[day_of_week]
    if season is LiturgicalSeason.HOLY_WEEK:
        return "Easter Even" if day_of_week == 6 else f"{weekday} before Easter"
    if season is LiturgicalSeason.EASTER and week == 1:
        return f"{weekday} in Easter Week"
    if season is LiturgicalSeason.WHITSUN:
        return f"{weekday} in Whitsun Week"
    if season is LiturgicalSeason.ASCENSION:
        return f"{weekday} after Ascension Day"
    return f"{weekday} in {SEASON_NAMES[season]} {week}"


def compute_collect_id(season: LiturgicalSeason, week: int) -> str:
    return f"{season.value}-{week}"


# ── Precedence ───────────────────────────────────────────────────────

def _moveable_feast_rule(day: date, feasts: MoveableFeasts, is_sunday: bool) -> HolyDay | None:
    return find_moveable_holy_day(day, feasts)


def _fixed_holy_day_rule(day: date, feasts: MoveableFeasts, is_sunday: bool) -> HolyDay | None:
    holy_day = find_fixed_holy_day(day)
    if holy_day is None:
        return None
    # Minor saints' days give way to the Sunday.
    if is_sunday and holy_day.rank is HolyDayRank.MINOR:
        return None
    return holy_day


PrecedenceRule = Callable[[date, MoveableFeasts, bool], Optional[HolyDay]]

PRECEDENCE_RULES: tuple[PrecedenceRule, ...] = (
    _moveable_feast_rule,
    _fixed_holy_day_rule,
)


def apply_precedence(day: date, feasts: MoveableFeasts, is_sunday: bool) -> HolyDay | None:
    for rule in PRECEDENCE_RULES:
        holy_day = rule(day, feasts, is_sunday)
        if holy_day is not None:
            return holy_day
    return None


# ── Result dataclass ─────────────────────────────────────────────────

@dataclass(frozen=True)
class LiturgicalDay:
    date: date
    season: LiturgicalSeason
    week_of_season: int
    day_of_week: int  # 0 = Sunday ... 6 = Saturday
    name: str
    is_holy_day: bool
    holy_day_name: str | None
    holy_day_rank: HolyDayRank | None
    collect_id: str
    is_sunday: bool
    psalms_day: int

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "season": self.season.value,
            "week_of_season": self.week_of_season,
            "day_of_week": self.day_of_week,
            "name": self.name,
            "is_holy_day": self.is_holy_day,
            "holy_day_name": self.holy_day_name,
            "holy_day_rank": self.holy_day_rank.value if self.holy_day_rank else None,
            "collect_id": self.collect_id,
            "is_sunday": self.is_sunday,
            "psalms_day": self.psalms_day,
        }


def resolve_liturgical_day(day: date) -> LiturgicalDay:
    """Resolve the full liturgical identity of a civil date.

    Precedence: a moveable feast always wins; otherwise a fixed holy day
    wins unless it is a minor saint's day falling on a Sunday; otherwise the
    ordinary identity of the season, week and weekday stands.
    """
    day = _as_date(day)

    feasts = compute_moveable_feasts(day.year)
    season = determine_season(day, feasts)
    week = compute_week_of_season(day, season, feasts)
    day_of_week = day.isoweekday() % 7
    is_sunday = day_of_week == 0

    holy_day = apply_precedence(day, feasts, is_sunday)

    return LiturgicalDay(
        date=day,
        season=season,
        week_of_season=week,
        day_of_week=day_of_week,
        name=holy_day.name if holy_day else format_day_name(day, season, week),
        is_holy_day=holy_day is not None,
        holy_day_name=holy_day.name if holy_day else None,
        holy_day_rank=holy_day.rank if holy_day else None,
        collect_id=holy_day.collect_id if holy_day else compute_collect_id(season, week),
        is_sunday=is_sunday,
        psalms_day=get_psalter_day_number(day),
    )
