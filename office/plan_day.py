"""Day arithmetic for sequential plans anchored to a start date."""
from __future__ import annotations

from datetime import date, timedelta


def _as_date(value: date | str) -> date:
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


def days_between(start: date | str, end: date | str) -> int:
    """Days from start to end (positive when end is later)."""
    return (_as_date(end) - _as_date(start)).days


def compute_plan_day(start_date: date | str, current_date: date | str, total_days: int) -> int | None:
    """1-based plan day, or None before the start date or after the last day."""
    offset = days_between(start_date, current_date) + 1
    if offset < 1 or offset > total_days:
        return None
    return offset


def plan_date_for_day(start_date: date | str, plan_day: int) -> date:
    return _as_date(start_date) + timedelta(days=plan_day - 1)


def is_plan_complete(start_date: date | str, current_date: date | str, total_days: int) -> bool:
    return days_between(start_date, current_date) + 1 > total_days


def is_date_in_plan_range(start_date: date | str, current_date: date | str, total_days: int) -> bool:
    offset = days_between(start_date, current_date) + 1
    return 1 <= offset <= total_days


def plan_status(start_date: date | str, current_date: date | str, total_days: int) -> str:
    offset = days_between(start_date, current_date) + 1
    if offset < 1:
        return "not_started"
    if offset > total_days:
        return "complete"
    return "active"
