from datetime import date

import pytest

from office.plan_day import (
    compute_plan_day,
    days_between,
    is_date_in_plan_range,
    is_plan_complete,
    plan_date_for_day,
    plan_status,
)
from office.plans import PLANS, PlanId, PlanScheme, get_plan, supported_plans
from office.errors import UnknownPlanError


# ── Plan day arithmetic ──────────────────────────────────────────────

def test_days_between_accepts_iso_strings():
    assert days_between("2026-01-01", "2026-01-31") == 30
    assert days_between(date(2026, 1, 31), date(2026, 1, 1)) == -30


def test_compute_plan_day_range():
    start = date(2026, 1, 1)
    assert compute_plan_day(start, date(2026, 1, 1), 365) == 1
    assert compute_plan_day(start, date(2026, 12, 31), 365) == 365
    assert compute_plan_day(start, date(2025, 12, 31), 365) is None
    assert compute_plan_day(start, date(2027, 1, 1), 365) is None


def test_plan_day_round_trip():
    start = date(2024, 2, 20)
    for plan_day in (1, 10, 100, 358):
        current = plan_date_for_day(start, plan_day)
        assert compute_plan_day(start, current, 358) == plan_day


def test_plan_date_for_day_crosses_leap_day():
    assert plan_date_for_day("2024-02-28", 2) == date(2024, 2, 29)
    assert plan_date_for_day("2024-02-28", 3) == date(2024, 3, 1)


@pytest.mark.parametrize(
    "current, status",
    [
        (date(2026, 9, 30), "not_started"),
        (date(2026, 10, 1), "active"),
        (date(2027, 9, 30), "active"),
        (date(2027, 10, 1), "complete"),
    ],
)
def test_plan_status(current, status):
    assert plan_status(date(2026, 10, 1), current, 365) == status


def test_range_and_completion_agree_with_status():
    start = date(2026, 10, 1)
    assert is_date_in_plan_range(start, date(2026, 10, 1), 365) is True
    assert is_date_in_plan_range(start, date(2026, 9, 30), 365) is False
    assert is_plan_complete(start, date(2027, 10, 1), 365) is True
    assert is_plan_complete(start, date(2027, 9, 30), 365) is False


# ── Plan registry ────────────────────────────────────────────────────

def test_registry_lists_every_plan():
    assert supported_plans() == ["1662-original", "1662-revised", "mcheyne", "bibleproject"]


def test_get_plan_by_string_and_enum():
    assert get_plan("mcheyne") is PLANS[PlanId.MCHEYNE]
    assert get_plan(PlanId.BIBLEPROJECT).sessions == ("daily",)
    assert get_plan("1662-revised").scheme is PlanScheme.LITURGICAL


def test_get_plan_unknown():
    with pytest.raises(UnknownPlanError) as exc_info:
        get_plan("sarum")
    assert exc_info.value.plan_id == "sarum"
    assert isinstance(exc_info.value, ValueError)
