import logging
from datetime import date as date_type

from fastapi import APIRouter, Depends, Query

from .. import schemas
from ..calendar_engine import resolve_liturgical_day
from ..dependencies import requested_date
from ..feast_engine import compute_moveable_feasts

router = APIRouter(prefix="/v1/calendar", tags=["calendar"])
logger = logging.getLogger("office.api")


@router.get("/day", response_model=schemas.LiturgicalDayResponse)
def liturgical_day(day: date_type = Depends(requested_date)):
    """Liturgical identity of a date (defaults to today)."""
    result = resolve_liturgical_day(day)
    logger.debug("Liturgical day | date=%s | collect=%s", day.isoformat(), result.collect_id)
    return schemas.LiturgicalDayResponse(**result.to_dict())


@router.get("/feasts", response_model=schemas.MoveableFeastsResponse)
def moveable_feasts(year: int = Query(ge=1583, le=4099)):
    return schemas.MoveableFeastsResponse(year=year, feasts=compute_moveable_feasts(year).to_dict())
