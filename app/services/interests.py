"""Interest (contact request) service.

Interests reference candidates by id without a foreign key, so a candidate
may be deleted while its interests remain.  Listings fall back to a
``"Candidate #<id>"`` label when the candidate no longer exists.
"""

from __future__ import annotations

import logging

from supabase import Client

from app.db.supabase import fetch_all
from app.models.interest import (
    Interest,
    InterestCreate,
    InterestWithCandidate,
)
from app.services import candidates as candidate_service

logger = logging.getLogger(__name__)

TABLE = "interests"


def _candidate_label(candidate_id: int) -> str:
    return f"Candidate #{candidate_id}"


def create(client: Client, data: InterestCreate) -> Interest:
    payload = data.model_dump(mode="json")
    result = client.table(TABLE).insert(payload).execute()
    created = Interest(**result.data[0])
    logger.info(
        "interest_created",
        extra={"interest_id": created.id, "candidate_id": created.candidate_id},
    )
    return created


def get_by_id(client: Client, interest_id: int) -> Interest | None:
    result = (
        client.table(TABLE)
        .select("*")
        .eq("id", interest_id)
        .limit(1)
        .execute()
    )
    rows = result.data or []
    return Interest(**rows[0]) if rows else None


def list_all(client: Client) -> list[InterestWithCandidate]:
    """All interests, newest first, with the candidate's full name."""
    rows = fetch_all(
        lambda: client.table(TABLE)
        .select("*")
        .order("created_at", desc=True)
        .order("id", desc=True)
    )

    candidate_ids = sorted({row["candidate_id"] for row in rows})
    names = candidate_service.get_names_by_ids(client, candidate_ids)

    interests: list[InterestWithCandidate] = []
    for row in rows:
        candidate = names.get(row["candidate_id"])
        name = candidate.get("full_name") if candidate else None
        interests.append(
            InterestWithCandidate(
                **row,
                candidate_name=name or _candidate_label(row["candidate_id"]),
            )
        )
    return interests


def list_by_candidate(client: Client, candidate_id: int) -> list[Interest]:
    """Every interest for a candidate, whatever its status."""
    rows = fetch_all(
        lambda: client.table(TABLE)
        .select("*")
        .eq("candidate_id", candidate_id)
        .order("id")
    )
    return [Interest(**row) for row in rows]


def update_status(client: Client, interest_id: int, status: str) -> Interest | None:
    """Overwrite the status.  Returns ``None`` if the interest does not exist.

    The value is not checked against ``InterestStatus``.
    """
    result = (
        client.table(TABLE)
        .update({"status": status})
        .eq("id", interest_id)
        .execute()
    )
    rows = result.data or []
    if not rows:
        return None
    logger.info(
        "interest_status_updated",
        extra={"interest_id": interest_id, "status": status},
    )
    return Interest(**rows[0])
