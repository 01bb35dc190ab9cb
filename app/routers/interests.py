"""Interest (contact request) endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from app.db.supabase import get_supabase
from app.models.interest import (
    Interest,
    InterestCreate,
    InterestStatusUpdate,
    InterestWithCandidate,
)
from app.services import interests as interest_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/interests", response_model=Interest, status_code=201)
def submit_interest(
    body: InterestCreate,
    client: Client = Depends(get_supabase),
) -> Interest:
    """Public submission of interest in a candidate."""
    return interest_service.create(client, body)


@router.get("/interests", response_model=list[InterestWithCandidate])
def list_interests(client: Client = Depends(get_supabase)) -> list[InterestWithCandidate]:
    return interest_service.list_all(client)


@router.get("/candidates/{candidate_id}/interests", response_model=list[Interest])
def list_candidate_interests(
    candidate_id: int,
    client: Client = Depends(get_supabase),
) -> list[Interest]:
    return interest_service.list_by_candidate(client, candidate_id)


@router.put("/interests/{interest_id}/status", response_model=Interest)
def update_interest_status(
    interest_id: int,
    body: InterestStatusUpdate,
    client: Client = Depends(get_supabase),
) -> Interest:
    updated = interest_service.update_status(client, interest_id, body.status)
    if updated is None:
        raise HTTPException(status_code=404, detail="Interest not found")
    return updated
