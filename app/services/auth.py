"""Identity sync with Firebase.

``sync_user`` verifies a Firebase ID token and upserts the matching row in
``users`` keyed by the Firebase uid.  Name, email and picture are refreshed
on every call; ``role`` is never written here and keeps its column default
(``user``) until changed out of band.
"""

from __future__ import annotations

import logging
from typing import Any

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError
from supabase import Client

from app.core.config import settings
from app.core.errors import AuthenticationError
from app.models.user import User, UserUpsert

logger = logging.getLogger(__name__)

TABLE = "users"


def get_firebase_app() -> firebase_admin.App:
    """Return the default Firebase app, initialising it from settings once."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        cred = credentials.Certificate({
            "type": "service_account",
            "project_id": settings.FIREBASE_PROJECT_ID,
            "client_email": settings.FIREBASE_CLIENT_EMAIL,
            "private_key": settings.FIREBASE_PRIVATE_KEY,
            "token_uri": "https://oauth2.googleapis.com/token",
        })
        app = firebase_admin.initialize_app(cred)
        logger.info(
            "firebase_initialized",
            extra={"project_id": settings.FIREBASE_PROJECT_ID},
        )
        return app


def verify_token(id_token: str) -> dict[str, Any]:
    """Verify *id_token* and return its claims.

    Raises ``AuthenticationError`` for invalid, expired, or revoked tokens.
    """
    try:
        return auth.verify_id_token(id_token, app=get_firebase_app())
    except (ValueError, FirebaseError) as exc:
        logger.warning(
            "firebase_token_rejected",
            extra={"error_type": type(exc).__name__, "error_message": str(exc)},
        )
        raise AuthenticationError("Invalid identity token") from exc


def sync_user(client: Client, id_token: str) -> User:
    """Verify the token and upsert the user it identifies."""
    claims = verify_token(id_token)

    upsert = UserUpsert(
        firebase_uid=claims.get("uid") or claims["user_id"],
        name=claims.get("name") or "",
        email=claims.get("email") or "",
        picture=claims.get("picture") or None,
    )

    result = (
        client.table(TABLE)
        .upsert(upsert.model_dump(), on_conflict="firebase_uid")
        .execute()
    )
    user = User(**result.data[0])
    logger.info(
        "user_synced",
        extra={"user_id": user.id, "role": user.role.value},
    )
    return user
