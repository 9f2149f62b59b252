"""Lectionary resolution: (date, session, plan) -> appointed readings.

Each plan's table is produced offline by the data-preparation step and is
loaded once per process through a LectionaryCache. Concurrent callers for a
plan that is still loading await the same in-flight load.

A missing or malformed entry is never an error: it resolves to empty
readings. A table that cannot be loaded raises LectionaryLoadError.
"""
from __future__ import annotations

import asyncio
import calendar
import json
import logging
import time
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .calendar_engine import LiturgicalDay, LiturgicalSeason, resolve_liturgical_day
from .config import Settings, settings as default_settings
from .errors import LectionaryLoadError
from .plans import PlanConfig, PlanId, PlanScheme, get_plan
from .schemas import (
    BibleProjectDayEntry,
    CivilDayEntry,
    DailyReadings,
    FixedDayEntry,
    McheyneDayEntry,
    RegularDayEntry,
)

logger = logging.getLogger("office.lectionary")

ModelT = TypeVar("ModelT", bound=BaseModel)
TableLoader = Callable[[PlanConfig], Awaitable[Any]]


# ── Table loading ────────────────────────────────────────────────────

class FileTableLoader:
    """Reads `{data_dir}/{table_file}` from local storage."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)

    async def __call__(self, plan: PlanConfig) -> Any:
        path = self.data_dir / plan.table_file
        try:
            raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return json.loads(raw)
        except OSError as exc:
            raise LectionaryLoadError(plan.id.value, f"cannot read {path}: {exc}") from exc
        except ValueError as exc:
            raise LectionaryLoadError(plan.id.value, f"invalid JSON in {path}: {exc}") from exc


class HttpTableLoader:
    """Fetches `{base_url}/{table_file}` with httpx."""

    def __init__(self, base_url: str, timeout: float, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def __call__(self, plan: PlanConfig) -> Any:
        url = f"{self.base_url}/{plan.table_file}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code if exc.response is not None else -1
            raise LectionaryLoadError(plan.id.value, f"HTTP {status} from {url}") from exc
        except httpx.HTTPError as exc:
            raise LectionaryLoadError(plan.id.value, f"request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise LectionaryLoadError(plan.id.value, f"invalid JSON from {url}: {exc}") from exc


def default_loader(config: Settings | None = None) -> TableLoader:
    config = config or default_settings
    if config.lectionary_base_url:
        return HttpTableLoader(config.lectionary_base_url, config.lectionary_timeout_seconds)
    return FileTableLoader(config.lectionary_data_dir)


@dataclass(frozen=True)
class LectionaryTable:
    plan_id: PlanId
    entries: dict[Any, Any]  # "MM-DD", liturgical key, or plan day -> raw entry
    fixed: dict[str, Any] = field(default_factory=dict)
    max_day: int = 0


def _prepare_table(plan: PlanConfig, raw: Any) -> LectionaryTable:
    if plan.scheme is PlanScheme.CIVIL:
        if not isinstance(raw, dict):
            raise LectionaryLoadError(plan.id.value, "expected an object keyed by MM-DD")
        entries = {k: v for k, v in raw.items() if not k.startswith("_")}
        return LectionaryTable(plan.id, entries)

    if plan.scheme is PlanScheme.LITURGICAL:
        regular = raw.get("regular") if isinstance(raw, dict) else None
        fixed = raw.get("fixed", {}) if isinstance(raw, dict) else None
        if not isinstance(regular, dict) or not isinstance(fixed, dict):
            raise LectionaryLoadError(plan.id.value, "expected 'regular' and 'fixed' objects")
        return LectionaryTable(plan.id, regular, fixed)

    if not isinstance(raw, list):
        raise LectionaryLoadError(plan.id.value, "expected an array of plan days")
    by_day: dict[int, Any] = {}
    for item in raw:
        day = item.get("day") if isinstance(item, dict) else None
        if isinstance(day, int) and not isinstance(day, bool):
            by_day[day] = item
        else:
            logger.debug("Skipping plan entry without a day number | plan=%s", plan.id.value)
    return LectionaryTable(plan.id, by_day, max_day=max(by_day, default=0))


def _mark_retrieved(future: asyncio.Future) -> None:
    # Every waiter may have been cancelled before a load fails.
    if not future.cancelled():
        future.exception()


class LectionaryCache:
    """Populate-once, read-many store of lectionary tables keyed by plan.

    The in-flight load itself is memoized, so concurrent callers for the
    same plan share one load and see the same result or the same error.
    A failed load is not retained; a later call loads again.
    """

    def __init__(self, loader: TableLoader):
        self._loader = loader
        self._tables: dict[PlanId, LectionaryTable] = {}
        self._pending: dict[PlanId, asyncio.Future[LectionaryTable]] = {}

    def is_loaded(self, plan_id: PlanId) -> bool:
        return plan_id in self._tables

    async def get(self, plan: PlanConfig) -> LectionaryTable:
        table = self._tables.get(plan.id)
        if table is not None:
            return table
        pending = self._pending.get(plan.id)
        if pending is None:
            pending = asyncio.ensure_future(self._load(plan))
            pending.add_done_callback(_mark_retrieved)
            self._pending[plan.id] = pending
        return await asyncio.shield(pending)

    async def _load(self, plan: PlanConfig) -> LectionaryTable:
        started_at = time.perf_counter()
        try:
            table = _prepare_table(plan, await self._loader(plan))
            self._tables[plan.id] = table
        except LectionaryLoadError as exc:
            logger.error("Lectionary table load failed | plan=%s | err=%s", plan.id.value, exc.reason)
            raise
        except Exception as exc:
            logger.exception("Lectionary table load failed | plan=%s", plan.id.value)
            raise LectionaryLoadError(plan.id.value, str(exc)) from exc
        finally:
            self._pending.pop(plan.id, None)

        logger.info(
            "Lectionary table loaded | plan=%s | entries=%s | time=%.3fs",
            plan.id.value,
            len(table.entries) + len(table.fixed),
            time.perf_counter() - started_at,
        )
        return table


def _validate(model: type[ModelT], raw: Any, plan_id: PlanId, key: Any) -> ModelT | None:
    if raw is None:
        return None
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        logger.warning(
            "Malformed lectionary entry | plan=%s | key=%s | errors=%s",
            plan_id.value,
            key,
            exc.error_count(),
        )
        return None


# ── Civil-calendar scheme ────────────────────────────────────────────

def civil_key(day: date) -> str:
    return f"{day.month:02d}-{day.day:02d}"


def resolve_civil_readings(table: LectionaryTable, day: date, session: str) -> DailyReadings:
    key = civil_key(day)
    entry = _validate(CivilDayEntry, table.entries.get(key), table.plan_id, key)
    if entry is None:
        return DailyReadings.empty()
    return entry.morning if session == "morning" else entry.evening


# ── Liturgical-calendar scheme ───────────────────────────────────────

KEY_DAY_NAMES = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")

SPECIAL_KEYS: dict[str, str] = {
    "Easter Day": "easterday",
    "Ascension Day": "ascension",
    "Whitsunday": "whitsunday",
    "Trinity Sunday": "trinity-sunday",
    "Ash Wednesday": "ashwednesday",
    "Good Friday": "goodfriday",
    "Palm Sunday": "palmsunday",
    "Christmas Day": "christmas",
}

_PRE_LENT_PREFIXES = ("septuagesima", "sexagesima", "quinquagesima")


def _season_prefix(season: LiturgicalSeason, week: int) -> str:
    if season is LiturgicalSeason.PRE_LENT:
        return _PRE_LENT_PREFIXES[min(max(week, 1), 3) - 1]
    if season is LiturgicalSeason.HOLY_WEEK:
        return "holyweek"
    if season in (LiturgicalSeason.ASCENSION, LiturgicalSeason.WHITSUN):
        return season.value
    return f"{season.value}{week}"


def compute_liturgical_key(liturgical_day: LiturgicalDay) -> str:
    """Key into the "regular" table, e.g. "advent1", "trinity5-monday"."""
    if liturgical_day.holy_day_name:
        special = SPECIAL_KEYS.get(liturgical_day.holy_day_name)
        if special:
            return special

    prefix = _season_prefix(liturgical_day.season, liturgical_day.week_of_season)
    if liturgical_day.day_of_week == 0:
        return prefix
    return f"{prefix}-{KEY_DAY_NAMES[liturgical_day.day_of_week]}"


def resolve_liturgical_readings(table: LectionaryTable, session: str, liturgical_day: LiturgicalDay) -> DailyReadings:
    key = compute_liturgical_key(liturgical_day)
    regular = _validate(RegularDayEntry, table.entries.get(key), table.plan_id, key)
    if regular is not None:
        session_entry = regular.morning if session == "morning" else regular.evening
        if session_entry is not None:
            return session_entry.primary_readings()

    if liturgical_day.is_holy_day:
        fixed_key = liturgical_day.collect_id
        fixed = _validate(FixedDayEntry, table.fixed.get(fixed_key), table.plan_id, fixed_key)
        if fixed is not None:
            session_entry = fixed.morning if session == "morning" else fixed.second_evensong
            if session_entry is not None:
                return session_entry.primary_readings()

    logger.debug("No liturgical lectionary entry | plan=%s | key=%s", table.plan_id.value, key)
    return DailyReadings.empty()


# ── Sequential whole-Bible scheme ────────────────────────────────────

def legacy_plan_day(day: date) -> int:
    """Plan day from the day of the year, for plans with no start date.

    29 February reuses 28 February's entry and later days in a leap year
    shift back by one, so every year reads 365 entries.
    """
    day_of_year = day.timetuple().tm_yday
    if calendar.isleap(day.year):
        if day.month == 2 and day.day == 29:
            return day_of_year - 1
        if day_of_year > 60:
            return day_of_year - 1
    return day_of_year


def _mcheyne_readings(raw: Any, plan_id: PlanId, plan_day: int, session: str) -> DailyReadings:
    entry = _validate(McheyneDayEntry, raw, plan_id, plan_day)
    if entry is None:
        return DailyReadings.empty()
    readings = entry.morning if session == "morning" else entry.evening
    return DailyReadings(first=readings[:1], second=readings[1:2])


def _bibleproject_readings(raw: Any, plan_id: PlanId, plan_day: int, session: str) -> DailyReadings:
    entry = _validate(BibleProjectDayEntry, raw, plan_id, plan_day)
    if entry is None:
        return DailyReadings.empty()
    return DailyReadings(first=entry.reading, second=[entry.psalm] if entry.psalm else [])


_SEQUENTIAL_READERS = {
    PlanId.MCHEYNE: _mcheyne_readings,
    PlanId.BIBLEPROJECT: _bibleproject_readings,
}


def resolve_sequential_readings(
    table: LectionaryTable,
    day: date,
    session: str,
    plan_day: int | None = None,
) -> DailyReadings:
    if plan_day is None:
        plan_day = min(legacy_plan_day(day), table.max_day)

    raw = table.entries.get(plan_day)
    if raw is None:
        logger.debug("No plan day entry | plan=%s | day=%s", table.plan_id.value, plan_day)
        return DailyReadings.empty()
    return _SEQUENTIAL_READERS[table.plan_id](raw, table.plan_id, plan_day, session)


# ── Resolver ─────────────────────────────────────────────────────────

class LectionaryResolver:
    """Dispatches a reading request to its plan's addressing scheme."""

    def __init__(self, cache: LectionaryCache | None = None, *, loader: TableLoader | None = None):
        self.cache = cache or LectionaryCache(loader or default_loader())

    async def resolve_readings(
        self,
        day: date,
        session: str,
        plan_id: str | PlanId,
        liturgical_day: LiturgicalDay | None = None,
        plan_day: int | None = None,
    ) -> DailyReadings:
        plan = get_plan(plan_id)
        if session not in plan.sessions:
            raise ValueError(f"Plan {plan.id.value} has no {session} session")

        table = await self.cache.get(plan)

        if plan.scheme is PlanScheme.CIVIL:
            return resolve_civil_readings(table, day, session)
        if plan.scheme is PlanScheme.LITURGICAL:
            return resolve_liturgical_readings(table, session, liturgical_day or resolve_liturgical_day(day))
        return resolve_sequential_readings(table, day, session, plan_day)
