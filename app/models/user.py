"""Pydantic models for the ``users`` table and the auth sync request."""

from datetime import datetime

from pydantic import AliasChoices, Field

from app.models.base import ApiModel
from app.models.enums import UserRole


class AuthSyncRequest(ApiModel):
    """Body of ``POST /api/auth/sync``."""
    external_id_token: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices(
            "externalIdToken", "firebaseIdToken", "external_id_token"
        ),
    )


class UserUpsert(ApiModel):
    """Columns refreshed on every successful sync.  ``role`` is never sent."""
    firebase_uid: str
    name: str = ""
    email: str = ""
    picture: str | None = None


class User(ApiModel):
    """Full user record returned from the database."""
    id: str
    firebase_uid: str
    name: str
    email: str
    picture: str | None = None
    role: UserRole = UserRole.user
    created_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin
