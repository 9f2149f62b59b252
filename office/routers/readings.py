import logging
from datetime import date as date_type

from fastapi import APIRouter, Depends, HTTPException, Query

from .. import schemas
from ..dependencies import get_resolver, requested_date
from ..lectionary_engine import LectionaryResolver
from ..plan_day import compute_plan_day, plan_status
from ..plans import PlanScheme, get_plan
from ..schemas import DailyReadings

router = APIRouter(prefix="/v1/readings", tags=["readings"])
logger = logging.getLogger("office.api")


@router.get("", response_model=schemas.ReadingsResponse)
async def readings(
    day: date_type = Depends(requested_date),
    plan: str = Query(default="1662-revised"),
    session: str | None = Query(default=None),
    start_date: date_type | None = Query(default=None, description="Day 1 of a sequential plan"),
    resolver: LectionaryResolver = Depends(get_resolver),
):
    """Appointed readings for one session of one plan.

    Sequential plans read by day of the year unless a start date is given;
    outside the started plan's range the readings are empty.
    """
    config = get_plan(plan)
    session = session or config.sessions[0]

    plan_day: int | None = None
    status: str | None = None
    if config.scheme is PlanScheme.SEQUENTIAL and start_date is not None:
        status = plan_status(start_date, day, config.total_days)
        plan_day = compute_plan_day(start_date, day, config.total_days)

    if status is not None and status != "active":
        if session not in config.sessions:
            raise HTTPException(status_code=422, detail=f"Plan {config.id.value} has no {session} session")
        result = DailyReadings.empty()
    else:
        try:
            result = await resolver.resolve_readings(day, session, config.id, plan_day=plan_day)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

    logger.info(
        "Readings | plan=%s | date=%s | session=%s | plan_day=%s | empty=%s",
        config.id.value,
        day.isoformat(),
        session,
        plan_day,
        result.is_empty(),
    )
    return schemas.ReadingsResponse(
        date=day,
        session=session,
        plan=config.id.value,
        plan_day=plan_day,
        plan_status=status,
        first=result.first,
        second=result.second,
        labels={
            "first": [ref.label() for ref in result.first],
            "second": [ref.label() for ref in result.second],
        },
    )
