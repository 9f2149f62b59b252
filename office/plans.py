"""Registry of the shipped reading plans and how each one is addressed."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import UnknownPlanError


class PlanScheme(str, Enum):
    CIVIL = "civil"  # keyed by "MM-DD"
    LITURGICAL = "liturgical"  # keyed by season/week/weekday or holy-day collect
    SEQUENTIAL = "sequential"  # keyed by plan day number


class PlanId(str, Enum):
    BCP_1662_ORIGINAL = "1662-original"
    BCP_1662_REVISED = "1662-revised"
    MCHEYNE = "mcheyne"
    BIBLEPROJECT = "bibleproject"


@dataclass(frozen=True)
class PlanConfig:
    id: PlanId
    name: str
    scheme: PlanScheme
    sessions: tuple[str, ...]
    table_file: str
    has_psalter: bool = False
    total_days: int | None = None
    needs_start_date: bool = False


PLANS: dict[PlanId, PlanConfig] = {
    PlanId.BCP_1662_ORIGINAL: PlanConfig(
        id=PlanId.BCP_1662_ORIGINAL,
        name="1662 Book of Common Prayer",
        scheme=PlanScheme.CIVIL,
        sessions=("morning", "evening"),
        table_file="1662-original.json",
        has_psalter=True,
    ),
    PlanId.BCP_1662_REVISED: PlanConfig(
        id=PlanId.BCP_1662_REVISED,
        name="1662 BCP (1922 Revised Lectionary)",
        scheme=PlanScheme.LITURGICAL,
        sessions=("morning", "evening"),
        table_file="1662-revised.json",
        has_psalter=True,
    ),
    PlanId.MCHEYNE: PlanConfig(
        id=PlanId.MCHEYNE,
        name="M'Cheyne",
        scheme=PlanScheme.SEQUENTIAL,
        sessions=("morning", "evening"),
        table_file="mcheyne.json",
        total_days=365,
        needs_start_date=True,
    ),
    PlanId.BIBLEPROJECT: PlanConfig(
        id=PlanId.BIBLEPROJECT,
        name="BibleProject: One Story",
        scheme=PlanScheme.SEQUENTIAL,
        sessions=("daily",),
        table_file="bibleproject.json",
        total_days=358,
        needs_start_date=True,
    ),
}


def get_plan(plan_id: str | PlanId) -> PlanConfig:
    try:
        return PLANS[PlanId(plan_id)]
    except ValueError:
        raise UnknownPlanError(str(plan_id)) from None


def supported_plans() -> list[str]:
    return [plan_id.value for plan_id in PLANS]
