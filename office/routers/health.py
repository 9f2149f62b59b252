from datetime import datetime, timezone

from fastapi import APIRouter

from ..plans import supported_plans

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"ok": True, "plans": supported_plans(), "timestamp": datetime.now(timezone.utc).isoformat()}
