"""Identity sync endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from supabase import Client

from app.db.supabase import get_supabase
from app.models.user import AuthSyncRequest, User
from app.services.auth import sync_user

router = APIRouter()


@router.post("/sync", response_model=User)
def sync(body: AuthSyncRequest, client: Client = Depends(get_supabase)) -> User:
    """Verify a Firebase ID token and upsert the user.

    Returns 401 when the token is invalid or expired.
    """
    return sync_user(client, body.external_id_token)
