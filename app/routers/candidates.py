"""Candidate endpoints: CRUD, free-text search, filters, resume upload.

``/search``, ``/filter`` and ``/parse-resume`` are declared before
``/{candidate_id}`` so they are not captured by the id route.

Storage-bound endpoints are plain ``def`` functions; FastAPI runs them in its
threadpool so slow storage round-trips do not block other requests.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from starlette.responses import Response
from supabase import Client

from app.core.config import settings
from app.db.supabase import get_supabase
from app.models.base import split_comma_list
from app.models.candidate import Candidate, CandidateCreate, CandidateUpdate
from app.services import candidates as candidate_service
from app.services import resume as resume_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_experience(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid experience value") from exc
    if value < 0:
        raise HTTPException(status_code=400, detail="Invalid experience value")
    return value


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------

@router.get("", response_model=list[Candidate])
def list_candidates(client: Client = Depends(get_supabase)) -> list[Candidate]:
    """Return all candidates, including inactive ones."""
    return candidate_service.get_all(client)


@router.post("", response_model=Candidate, status_code=201)
def create_candidate(
    body: CandidateCreate,
    client: Client = Depends(get_supabase),
) -> Candidate:
    return candidate_service.create(client, body)


# ---------------------------------------------------------------------------
# Search / filter
# ---------------------------------------------------------------------------

@router.get("/search", response_model=list[Candidate])
def search_candidates(
    q: str = Query(default="", description="Free-text query, e.g. 'React 3+ years'"),
    client: Client = Depends(get_supabase),
) -> list[Candidate]:
    """Interpret *q* and return matching active candidates."""
    matches, _ = candidate_service.search(client, q)
    return matches


@router.get("/filter", response_model=list[Candidate])
def filter_candidates(
    skills: str | None = Query(default=None, description="Comma-separated skills"),
    experience: str | None = Query(default=None, description="Minimum years"),
    availability: str | None = Query(default=None, description="Exact availability label"),
    client: Client = Depends(get_supabase),
) -> list[Candidate]:
    """Explicit filters; inactive candidates are included."""
    return candidate_service.filter_by(
        client,
        skills=split_comma_list(skills) if skills else None,
        min_experience=_parse_experience(experience),
        availability=availability or None,
    )


# ---------------------------------------------------------------------------
# Resume upload
# ---------------------------------------------------------------------------

@router.post("/parse-resume", response_model=Candidate, status_code=201)
async def parse_resume(
    file: UploadFile = File(..., description="PDF or plain text resume"),
    client: Client = Depends(get_supabase),
) -> Candidate:
    """Create a candidate from an uploaded resume."""
    # One byte over the limit is enough to reject oversized uploads
    content = await file.read(settings.MAX_RESUME_BYTES + 1)
    return await resume_service.create_candidate_from_resume(
        client,
        content,
        file.content_type,
        filename=file.filename,
    )


# ---------------------------------------------------------------------------
# Single candidate
# ---------------------------------------------------------------------------

@router.get("/{candidate_id}", response_model=Candidate)
def get_candidate(
    candidate_id: int,
    client: Client = Depends(get_supabase),
) -> Candidate:
    candidate = candidate_service.get_by_id(client, candidate_id)
    if candidate is None:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return candidate


@router.put("/{candidate_id}", response_model=Candidate)
def update_candidate(
    candidate_id: int,
    body: CandidateUpdate,
    client: Client = Depends(get_supabase),
) -> Candidate:
    updated = candidate_service.update(client, candidate_id, body)
    if updated is None:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return updated


@router.delete("/{candidate_id}", status_code=204, response_class=Response)
def delete_candidate(
    candidate_id: int,
    client: Client = Depends(get_supabase),
) -> Response:
    if not candidate_service.delete(client, candidate_id):
        raise HTTPException(status_code=404, detail="Candidate not found")
    return Response(status_code=204)
