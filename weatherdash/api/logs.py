"""Recent application log records."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from weatherdash.core.logging_config import recent_logs

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("")
def list_logs(
    limit: int = Query(100, ge=1, le=200),
    view_id: Optional[str] = Query(None, description="Only records raised while serving this browser view"),
    level: Optional[str] = Query(None, description="Minimum level, e.g. WARNING"),
) -> dict[str, list[dict[str, str]]]:
    try:
        logs = recent_logs(limit, view_id=view_id, min_level=level)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"logs": logs}


__all__ = ["router"]
