"""Candidate storage and search service.

CRUD against the ``candidates`` table plus the two search paths: free-text
search (via ``QueryInterpreter``) and explicit UI filters.  Matching runs in
Python over the fetched rows.
"""

from __future__ import annotations

import logging
from typing import Any

from supabase import Client

from app.core.errors import SearchError
from app.db.supabase import fetch_all
from app.models.candidate import Candidate, CandidateCreate, CandidateUpdate
from app.services.query_interpreter import (
    QueryInterpreter,
    SearchCriteria,
    filter_candidates as apply_filters,
)

logger = logging.getLogger(__name__)

TABLE = "candidates"

_interpreter = QueryInterpreter()


def _to_candidates(rows: list[dict[str, Any]] | None) -> list[Candidate]:
    return [Candidate(**row) for row in rows or []]


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def get_all(client: Client) -> list[Candidate]:
    """Return every candidate, active or not, in id order."""
    return _to_candidates(
        fetch_all(lambda: client.table(TABLE).select("*").order("id"))
    )


def get_active(client: Client) -> list[Candidate]:
    return _to_candidates(
        fetch_all(
            lambda: client.table(TABLE).select("*").eq("is_active", True).order("id")
        )
    )


def get_by_id(client: Client, candidate_id: int) -> Candidate | None:
    result = (
        client.table(TABLE)
        .select("*")
        .eq("id", candidate_id)
        .limit(1)
        .execute()
    )
    rows = result.data or []
    return Candidate(**rows[0]) if rows else None


def get_names_by_ids(client: Client, candidate_ids: list[int]) -> dict[int, dict[str, Any]]:
    """Return display fields keyed by id for the given candidate ids."""
    if not candidate_ids:
        return {}
    rows = fetch_all(
        lambda: client.table(TABLE)
        .select("id, initials, full_name, title, location")
        .in_("id", candidate_ids)
        .order("id")
    )
    return {row["id"]: row for row in rows}


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def create(client: Client, data: CandidateCreate) -> Candidate:
    """Insert a candidate and return the stored row (with id / created_at)."""
    payload = data.model_dump()
    result = client.table(TABLE).insert(payload).execute()
    created = Candidate(**result.data[0])
    logger.info("candidate_created", extra={"candidate_id": created.id})
    return created


def update(
    client: Client,
    candidate_id: int,
    data: CandidateUpdate,
) -> Candidate | None:
    """Apply a partial update.  Returns ``None`` if the id does not exist.

    Only fields present in the request are written; everything else keeps
    its stored value.
    """
    existing = get_by_id(client, candidate_id)
    if existing is None:
        return None

    changes = data.changes()
    if not changes:
        return existing

    result = (
        client.table(TABLE)
        .update(changes)
        .eq("id", candidate_id)
        .execute()
    )
    rows = result.data or []
    if not rows:
        # Deleted between the read and the write
        return None

    logger.info(
        "candidate_updated",
        extra={"candidate_id": candidate_id, "fields": ",".join(sorted(changes))},
    )
    return Candidate(**rows[0])


def delete(client: Client, candidate_id: int) -> bool:
    """Hard delete.  Interests referencing the candidate are left in place."""
    result = client.table(TABLE).delete().eq("id", candidate_id).execute()
    removed = bool(result.data)
    if removed:
        logger.info("candidate_deleted", extra={"candidate_id": candidate_id})
    return removed


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

def search(
    client: Client,
    query: str,
    interpreter: QueryInterpreter = _interpreter,
) -> tuple[list[Candidate], SearchCriteria]:
    """Free-text search over active candidates.

    Returns the matches together with the criteria extracted from *query*.
    Storage failures surface as ``SearchError``; no partial results.
    """
    criteria = interpreter.interpret(query)
    try:
        active = get_active(client)
    except Exception as exc:
        logger.error(
            "candidate_search_failed",
            extra={"query": query, "error_message": str(exc)},
        )
        raise SearchError() from exc

    matches = interpreter.apply(criteria, active)
    logger.debug(
        "candidate_search",
        extra={
            "query": criteria.query,
            "search_type": criteria.search_type,
            "results_count": len(matches),
        },
    )
    return matches, criteria


def filter_by(
    client: Client,
    skills: list[str] | None = None,
    min_experience: int | None = None,
    availability: str | None = None,
) -> list[Candidate]:
    """Explicit filters over all candidates (inactive ones included)."""
    return apply_filters(
        get_all(client),
        skills=skills,
        min_experience=min_experience,
        availability=availability,
    )
