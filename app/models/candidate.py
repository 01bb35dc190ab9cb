"""Pydantic models for the ``candidates`` table.

``CandidateCreate`` and ``CandidateUpdate`` carry the admin form
normalisation: comma-separated skill/certification strings are split,
numeric strings are coerced, and blank optional strings become ``None``.

``CandidateUpdate`` is a partial update.  A field the client did not send is
left untouched; a field sent explicitly (even as ``null`` or ``""``) is
written.  Presence is tracked by pydantic's ``model_fields_set``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from app.core.constants import SKILLS_PLACEHOLDER
from app.models.base import ApiModel, blank_to_none, split_comma_list

# Columns declared NOT NULL; an explicit null in an update is rejected
NON_NULLABLE_FIELDS: frozenset[str] = frozenset({
    "initials",
    "full_name",
    "title",
    "location",
    "experience_years",
    "bio",
    "education",
    "availability",
    "is_active",
})


def _clean_list(value: Any) -> Any:
    if isinstance(value, str):
        return split_comma_list(value)
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return value


def normalize_skills(value: Any) -> Any:
    """Split / trim skills; an empty result collapses to the placeholder."""
    if value is None:
        return [SKILLS_PLACEHOLDER]
    cleaned = _clean_list(value)
    if isinstance(cleaned, list) and not cleaned:
        return [SKILLS_PLACEHOLDER]
    return cleaned


def normalize_certifications(value: Any) -> Any:
    if value is None:
        return []
    return _clean_list(value)


class _CandidateForm(ApiModel):
    """Validators shared by the create and update payloads."""

    @field_validator("skills", mode="before", check_fields=False)
    @classmethod
    def _skills(cls, value: Any) -> Any:
        return normalize_skills(value)

    @field_validator("certifications", mode="before", check_fields=False)
    @classmethod
    def _certifications(cls, value: Any) -> Any:
        return normalize_certifications(value)

    @field_validator(
        "profile_image_url",
        "contact_email",
        "contact_phone",
        "bill_rate",
        "pay_rate",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def _blank_optional(cls, value: Any) -> Any:
        return blank_to_none(value)


class CandidateCreate(_CandidateForm):
    """Payload for creating a candidate (insert)."""
    initials: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=1)
    profile_image_url: str | None = None
    title: str
    location: str
    skills: list[str]
    experience_years: int = Field(..., ge=0)
    bio: str
    education: str
    availability: str
    contact_email: str | None = None
    contact_phone: str | None = None
    certifications: list[str] = []
    bill_rate: int | None = Field(default=None, ge=0)
    pay_rate: int | None = Field(default=None, ge=0)
    is_active: bool = True


class CandidateUpdate(_CandidateForm):
    """Partial update payload.  See ``changes()``."""
    initials: str | None = None
    full_name: str | None = None
    profile_image_url: str | None = None
    title: str | None = None
    location: str | None = None
    skills: list[str] | None = None
    experience_years: int | None = Field(default=None, ge=0)
    bio: str | None = None
    education: str | None = None
    availability: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    certifications: list[str] | None = None
    bill_rate: int | None = Field(default=None, ge=0)
    pay_rate: int | None = Field(default=None, ge=0)
    is_active: bool | None = None

    @model_validator(mode="after")
    def _reject_null_required(self) -> CandidateUpdate:
        for name in NON_NULLABLE_FIELDS & self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Column values for the fields explicitly present in the request."""
        return self.model_dump(include=self.model_fields_set)


class Candidate(ApiModel):
    """Full candidate record returned from the database."""
    id: int
    initials: str
    full_name: str
    profile_image_url: str | None = None
    title: str
    location: str
    skills: list[str] = []
    experience_years: int = 0
    bio: str
    education: str
    availability: str
    contact_email: str | None = None
    contact_phone: str | None = None
    certifications: list[str] | None = []
    bill_rate: int | None = None
    pay_rate: int | None = None
    is_active: bool = True
    created_at: datetime | None = None
