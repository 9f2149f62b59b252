from datetime import date as date_type
from typing import Literal

from fastapi import APIRouter, Depends

from .. import schemas
from ..dependencies import requested_date
from ..psalter_engine import get_psalms_for_day, get_psalter_day_number, psalm_refs_for_day, should_omit_venite

router = APIRouter(prefix="/v1/psalter", tags=["psalter"])


@router.get("", response_model=schemas.PsalterResponse)
def psalter(
    day: date_type = Depends(requested_date),
    session: Literal["morning", "evening"] = "morning",
):
    return schemas.PsalterResponse(
        date=day,
        session=session,
        psalms_day=get_psalter_day_number(day),
        psalms=get_psalms_for_day(day, session),
        omit_venite=should_omit_venite(day) if session == "morning" else False,
        references=[ref.label() for ref in psalm_refs_for_day(day, session)],
    )
