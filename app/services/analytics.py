"""Analytics service: event tracking and dashboard aggregates.

View and search events are append-only rows in ``candidate_views`` and
``search_activity``.  Tracking is best-effort: routers schedule
``track_*_best_effort`` as background tasks and failures are only logged.

Aggregates are recomputed from the raw rows on every read and grouped in
Python (``Counter`` / dict grouping), no caching.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from datetime import datetime
from typing import Any

from supabase import Client

from app.core.constants import (
    RECENT_SEARCHES_LIMIT,
    SEARCH_STATS_LIMIT,
    TOP_VIEWED_LIMIT,
)
from app.db.supabase import fetch_all
from app.models.analytics import (
    CandidateViewStat,
    DashboardResponse,
    RecentSearch,
    RequestMetadata,
    SearchStat,
    TopViewedCandidate,
)
from app.services import candidates as candidate_service

logger = logging.getLogger(__name__)

VIEWS_TABLE = "candidate_views"
SEARCHES_TABLE = "search_activity"


def _parse_ts(raw: Any) -> datetime | None:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    return None


def _latest(values: list[Any]) -> datetime | None:
    parsed = [ts for ts in (_parse_ts(v) for v in values) if ts is not None]
    return max(parsed) if parsed else None


# ---------------------------------------------------------------------------
# Tracking
# ---------------------------------------------------------------------------

def track_view(
    client: Client,
    candidate_id: int,
    metadata: RequestMetadata | None = None,
) -> None:
    """Append a candidate view event."""
    meta = metadata or RequestMetadata()
    client.table(VIEWS_TABLE).insert({
        "candidate_id": candidate_id,
        "user_agent": meta.user_agent,
        "ip_address": meta.ip_address,
    }).execute()


def track_search(
    client: Client,
    query: str,
    search_type: str,
    results_count: int,
    metadata: RequestMetadata | None = None,
) -> None:
    """Append a search event."""
    meta = metadata or RequestMetadata()
    client.table(SEARCHES_TABLE).insert({
        "search_query": query,
        "search_type": search_type,
        "results_count": results_count,
        "user_agent": meta.user_agent,
        "ip_address": meta.ip_address,
    }).execute()


def track_view_best_effort(
    client: Client,
    candidate_id: int,
    metadata: RequestMetadata | None = None,
) -> None:
    """``track_view`` that logs instead of raising."""
    try:
        track_view(client, candidate_id, metadata)
    except Exception as exc:
        logger.warning(
            "track_view_failed",
            extra={"candidate_id": candidate_id, "error_message": str(exc)},
        )


def track_search_best_effort(
    client: Client,
    query: str,
    search_type: str,
    results_count: int,
    metadata: RequestMetadata | None = None,
) -> None:
    """``track_search`` that logs instead of raising."""
    try:
        track_search(client, query, search_type, results_count, metadata)
    except Exception as exc:
        logger.warning(
            "track_search_failed",
            extra={"search_query": query, "error_message": str(exc)},
        )


# ---------------------------------------------------------------------------
# Raw reads
# ---------------------------------------------------------------------------

def _fetch_views(client: Client) -> list[dict[str, Any]]:
    return fetch_all(
        lambda: client.table(VIEWS_TABLE)
        .select("candidate_id, viewed_at")
        .order("id")
    )


def _fetch_searches(client: Client) -> list[dict[str, Any]]:
    return fetch_all(
        lambda: client.table(SEARCHES_TABLE)
        .select("search_query, results_count, searched_at")
        .order("id")
    )


def _count_rows(client: Client, table: str) -> int:
    result = client.table(table).select("id", count="exact").execute()
    if result.count is not None:
        return int(result.count)
    return len(result.data or [])


# ---------------------------------------------------------------------------
# Candidate views
# ---------------------------------------------------------------------------

def _group_views(rows: list[dict[str, Any]]) -> tuple[Counter[int], dict[int, list[Any]]]:
    counts: Counter[int] = Counter()
    timestamps: dict[int, list[Any]] = defaultdict(list)
    for row in rows:
        cid = int(row["candidate_id"])
        counts[cid] += 1
        timestamps[cid].append(row.get("viewed_at"))
    return counts, timestamps


def _ranked(counts: Counter[int]) -> list[tuple[int, int]]:
    # Highest count first; ties broken by candidate id for a stable order
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def _view_stats_from_rows(
    client: Client, rows: list[dict[str, Any]]
) -> list[CandidateViewStat]:
    counts, timestamps = _group_views(rows)
    ranked = _ranked(counts)
    names = candidate_service.get_names_by_ids(client, [cid for cid, _ in ranked])

    stats: list[CandidateViewStat] = []
    for cid, count in ranked:
        candidate = names.get(cid, {})
        stats.append(
            CandidateViewStat(
                candidate_id=cid,
                initials=candidate.get("initials"),
                title=candidate.get("title"),
                view_count=count,
                last_viewed=_latest(timestamps[cid]),
            )
        )
    return stats


def _top_viewed_from_rows(
    client: Client, rows: list[dict[str, Any]], limit: int
) -> list[TopViewedCandidate]:
    counts, _ = _group_views(rows)
    ranked = _ranked(counts)[:limit]
    names = candidate_service.get_names_by_ids(client, [cid for cid, _ in ranked])

    return [
        TopViewedCandidate(
            candidate_id=cid,
            initials=names.get(cid, {}).get("initials"),
            title=names.get(cid, {}).get("title"),
            location=names.get(cid, {}).get("location"),
            view_count=count,
        )
        for cid, count in ranked
    ]


def get_candidate_view_stats(client: Client) -> list[CandidateViewStat]:
    """View count and last view per candidate, most viewed first.

    Candidates deleted since being viewed keep their counts with empty
    display fields.
    """
    return _view_stats_from_rows(client, _fetch_views(client))


def get_top_viewed_candidates(
    client: Client, limit: int = TOP_VIEWED_LIMIT
) -> list[TopViewedCandidate]:
    return _top_viewed_from_rows(client, _fetch_views(client), limit)


def get_total_view_count(client: Client) -> int:
    return _count_rows(client, VIEWS_TABLE)


# ---------------------------------------------------------------------------
# Searches
# ---------------------------------------------------------------------------

def _search_stats_from_rows(
    rows: list[dict[str, Any]], limit: int
) -> list[SearchStat]:
    grouped: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for row in rows:
        grouped[row["search_query"]].append(row)

    stats = [
        SearchStat(
            search_query=term,
            search_count=len(entries),
            avg_results=round(
                sum(int(e.get("results_count", 0)) for e in entries) / len(entries), 2
            ),
            last_searched=_latest([e.get("searched_at") for e in entries]),
        )
        for term, entries in grouped.items()
    ]
    stats.sort(key=lambda s: (-s.search_count, s.search_query))
    return stats[:limit]


def get_search_stats(
    client: Client, limit: int = SEARCH_STATS_LIMIT
) -> list[SearchStat]:
    """Frequency and average result count per search term."""
    return _search_stats_from_rows(_fetch_searches(client), limit)


def get_recent_searches(
    client: Client, limit: int = RECENT_SEARCHES_LIMIT
) -> list[RecentSearch]:
    result = (
        client.table(SEARCHES_TABLE)
        .select("search_query, search_type, results_count, searched_at")
        .order("searched_at", desc=True)
        .limit(limit)
        .execute()
    )
    return [RecentSearch(**row) for row in result.data or []]


def get_total_search_count(client: Client) -> int:
    return _count_rows(client, SEARCHES_TABLE)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def get_dashboard(client: Client) -> DashboardResponse:
    """All dashboard aggregates in one response."""
    views = _fetch_views(client)
    searches = _fetch_searches(client)

    return DashboardResponse(
        candidate_view_stats=_view_stats_from_rows(client, views),
        search_stats=_search_stats_from_rows(searches, SEARCH_STATS_LIMIT),
        top_viewed_candidates=_top_viewed_from_rows(client, views, TOP_VIEWED_LIMIT),
        recent_searches=get_recent_searches(client),
        total_views=get_total_view_count(client),
        total_searches=get_total_search_count(client),
    )
