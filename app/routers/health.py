"""Liveness check backed by a one-row read of ``candidates``."""

import logging

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse
from supabase import Client

from app.db.supabase import get_supabase

logger = logging.getLogger(__name__)

router = APIRouter()


def database_reachable(client: Client) -> bool:
    try:
        client.table("candidates").select("id").limit(1).execute()
    except Exception as exc:
        logger.warning("health_database_unreachable", extra={"error_message": str(exc)})
        return False
    return True


@router.get("/health")
def health_check(client: Client = Depends(get_supabase)) -> JSONResponse:
    """200 ``ok`` when the database answers, 503 ``degraded`` otherwise."""
    if database_reachable(client):
        return JSONResponse(status_code=200, content={"status": "ok", "database": "connected"})
    return JSONResponse(
        status_code=503,
        content={"status": "degraded", "database": "disconnected"},
    )
