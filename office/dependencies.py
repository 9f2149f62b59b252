from datetime import date as date_type

from fastapi import Query, Request

from .lectionary_engine import LectionaryResolver


def get_resolver(request: Request) -> LectionaryResolver:
    return request.app.state.resolver


def requested_date(
    date: date_type | None = Query(default=None, description="Pin 'today' to this date (YYYY-MM-DD)"),
) -> date_type:
    """The date-override convention: an explicit ?date= wins, otherwise today."""
    return date or date_type.today()
