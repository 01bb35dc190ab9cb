"""Models for analytics events and the admin dashboard.

Tracking models are the request bodies for events stored in
``candidate_views`` and ``search_activity``; the stats models are API-layer
aggregates computed by the analytics service.
"""

from datetime import datetime

from pydantic import Field

from app.models.base import ApiModel


# --- Tracking requests ---

class CandidateViewTrack(ApiModel):
    """Body of ``POST /api/analytics/candidate-view``."""
    candidate_id: int


class SearchTrack(ApiModel):
    """Body of ``POST /api/analytics/search``."""
    query: str
    search_type: str = "general"
    results_count: int = Field(default=0, ge=0)


class RequestMetadata(ApiModel):
    """Requester details captured alongside an event."""
    user_agent: str | None = None
    ip_address: str | None = None


# --- Aggregates ---

class CandidateViewStat(ApiModel):
    """View count per candidate."""
    candidate_id: int
    initials: str | None = None
    title: str | None = None
    view_count: int = 0
    last_viewed: datetime | None = None


class SearchStat(ApiModel):
    """Frequency of a search term."""
    search_query: str
    search_count: int = 0
    avg_results: float = 0.0
    last_searched: datetime | None = None


class TopViewedCandidate(ApiModel):
    """Most viewed candidates, with display fields."""
    candidate_id: int
    initials: str | None = None
    title: str | None = None
    location: str | None = None
    view_count: int = 0


class RecentSearch(ApiModel):
    """A recent search, newest first."""
    search_query: str
    search_type: str
    results_count: int
    searched_at: datetime | None = None


class DashboardResponse(ApiModel):
    """Full response for GET /api/analytics/dashboard."""
    candidate_view_stats: list[CandidateViewStat] = []
    search_stats: list[SearchStat] = []
    top_viewed_candidates: list[TopViewedCandidate] = []
    recent_searches: list[RecentSearch] = []
    total_views: int = 0
    total_searches: int = 0
