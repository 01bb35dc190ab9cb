"""Analytics endpoints: event tracking and the admin dashboard.

Tracking endpoints answer ``202 Accepted`` immediately; the insert runs as a
background task after the response and its failures are only logged.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from supabase import Client

from app.db.supabase import get_supabase
from app.models.analytics import (
    CandidateViewTrack,
    DashboardResponse,
    RequestMetadata,
    SearchTrack,
)
from app.services import analytics as analytics_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _request_metadata(request: Request) -> RequestMetadata:
    return RequestMetadata(
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
    )


@router.post("/candidate-view", status_code=202)
async def track_candidate_view(
    body: CandidateViewTrack,
    request: Request,
    background_tasks: BackgroundTasks,
    client: Client = Depends(get_supabase),
) -> dict[str, str]:
    background_tasks.add_task(
        analytics_service.track_view_best_effort,
        client,
        body.candidate_id,
        _request_metadata(request),
    )
    return {"message": "View tracked"}


@router.post("/search", status_code=202)
async def track_search(
    body: SearchTrack,
    request: Request,
    background_tasks: BackgroundTasks,
    client: Client = Depends(get_supabase),
) -> dict[str, str]:
    background_tasks.add_task(
        analytics_service.track_search_best_effort,
        client,
        body.query,
        body.search_type,
        body.results_count,
        _request_metadata(request),
    )
    return {"message": "Search tracked"}


@router.get("/dashboard", response_model=DashboardResponse)
def analytics_dashboard(client: Client = Depends(get_supabase)) -> DashboardResponse:
    """View and search aggregates, recomputed on every call."""
    return analytics_service.get_dashboard(client)
