"""Pydantic models for the ``interests`` table (contact requests)."""

from datetime import datetime
from typing import Any

from pydantic import EmailStr, Field, field_validator

from app.models.base import ApiModel, blank_to_none
from app.models.enums import InterestStatus


class InterestCreate(ApiModel):
    """Public interest submission."""
    candidate_id: int
    company_name: str = Field(..., min_length=1)
    contact_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str | None = None
    message: str | None = None
    status: InterestStatus = InterestStatus.new

    @field_validator("phone", "message", mode="before")
    @classmethod
    def _blank_optional(cls, value: Any) -> Any:
        return blank_to_none(value)


class InterestStatusUpdate(ApiModel):
    """Admin status change.

    Any non-blank string is accepted; values outside ``InterestStatus`` are
    stored as given.
    """
    status: str

    @field_validator("status")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Status is required")
        return value.strip()


class Interest(ApiModel):
    """Full interest record returned from the database."""
    id: int
    candidate_id: int
    company_name: str
    contact_name: str
    email: str
    phone: str | None = None
    message: str | None = None
    status: str = InterestStatus.new.value
    created_at: datetime | None = None


class InterestWithCandidate(Interest):
    """Interest joined with the candidate's full name."""
    candidate_name: str
