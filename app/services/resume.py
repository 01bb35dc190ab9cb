"""Resume upload: text extraction, LLM parsing, candidate creation.

PDF text is extracted with ``pdfplumber``; plain text is decoded as UTF-8.
The text is sent to an OpenAI-compatible chat completions endpoint which
returns a JSON object; missing fields are filled with defaults before the
candidate is created.
"""

from __future__ import annotations

import io
import json
import logging
from typing import Any

import httpx
import pdfplumber
from pydantic import BaseModel, ConfigDict, Field, field_validator
from starlette.concurrency import run_in_threadpool
from supabase import Client

from app.core.config import settings
from app.core.constants import DEFAULT_AVAILABILITY, RESUME_CONTENT_TYPES
from app.core.errors import InvalidInputError, UpstreamError
from app.models.candidate import Candidate, CandidateCreate
from app.services import candidates as candidate_service

logger = logging.getLogger(__name__)

RESUME_SYSTEM_PROMPT = """\
You are a resume parser that extracts structured information from resumes.
Parse the resume text and return a JSON object with the following structure:
{
  "fullName": "string",
  "title": "string - job title or professional title",
  "location": "string - city, state format",
  "email": "string",
  "phone": "string",
  "skills": ["array of technical skills"],
  "experienceYears": "number - total years of experience",
  "education": "string - highest degree and institution",
  "bio": "string - 2-3 sentence professional summary",
  "certifications": ["array of certifications"]
}

If any field is not found, use reasonable defaults or empty values.
For experienceYears, calculate based on work history dates.
For skills, extract technical skills, tools, and technologies mentioned.
For bio, create a concise professional summary based on the resume content.\
"""

DEFAULT_BIO = "Experienced professional with proven expertise in their field."


class ParsedResume(BaseModel):
    """LLM output with defaults for anything missing or malformed."""
    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(default="Unknown", alias="fullName")
    title: str = "Professional"
    location: str = "Location TBD"
    email: str = ""
    phone: str = ""
    skills: list[str] = []
    experience_years: int = Field(default=0, alias="experienceYears")
    education: str = "Education information not provided"
    bio: str = DEFAULT_BIO
    certifications: list[str] = []

    @field_validator("full_name", "title", "location", "education", "bio", mode="before")
    @classmethod
    def _blank_uses_default(cls, value: Any, info: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("email", "phone", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return value if isinstance(value, str) else ""

    @field_validator("skills", "certifications", mode="before")
    @classmethod
    def _list_or_empty(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [str(item) for item in value if str(item).strip()]

    @field_validator("experience_years", mode="before")
    @classmethod
    def _number_or_zero(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        return max(0, int(value))


def derive_initials(full_name: str) -> str:
    """``"Jane Q Doe"`` -> ``"JD"``; a single name gives one letter."""
    names = full_name.split()
    if not names:
        return "?"
    if len(names) == 1:
        return names[0][0].upper()
    return (names[0][0] + names[-1][0]).upper()


# ---------------------------------------------------------------------------
# Text extraction
# ---------------------------------------------------------------------------

def extract_text(content: bytes, content_type: str | None) -> str:
    """Return the resume's text.  Raises ``InvalidInputError`` on bad input."""
    content_type = (content_type or "").split(";")[0].strip().lower()
    if content_type not in RESUME_CONTENT_TYPES:
        raise InvalidInputError("Only PDF and plain text resumes are supported")
    if len(content) > settings.MAX_RESUME_BYTES:
        raise InvalidInputError("Resume file is too large")

    if content_type == "application/pdf":
        try:
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:  # pdfminer raises a variety of parse errors
            raise InvalidInputError("Could not read PDF file") from exc
        text = "\n".join(pages)
    else:
        text = content.decode("utf-8", errors="replace")

    if not text.strip():
        raise InvalidInputError("No text could be extracted from the resume")
    return text


# ---------------------------------------------------------------------------
# LLM parsing
# ---------------------------------------------------------------------------

def _chat_completions_url() -> str:
    if settings.LLM_PROVIDER != "openai":
        return f"https://api.{settings.LLM_PROVIDER}.com/v1/chat/completions"
    return "https://api.openai.com/v1/chat/completions"


async def parse_resume(resume_text: str) -> ParsedResume:
    """Send the resume text to the LLM and parse its JSON answer."""
    try:
        async with httpx.AsyncClient(timeout=60.0) as client:
            response = await client.post(
                _chat_completions_url(),
                headers={
                    "Authorization": f"Bearer {settings.LLM_API_KEY}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": settings.LLM_MODEL,
                    "messages": [
                        {"role": "system", "content": RESUME_SYSTEM_PROMPT},
                        {"role": "user", "content": f"Parse this resume:\n\n{resume_text}"},
                    ],
                    "response_format": {"type": "json_object"},
                    "temperature": 0.1,
                },
            )
            response.raise_for_status()
            data = response.json()
            content_str = data["choices"][0]["message"]["content"] or "{}"
            parsed = json.loads(content_str)
            if not isinstance(parsed, dict):
                raise ValueError("LLM response is not a JSON object")
            # pydantic's ValidationError is a ValueError
            return ParsedResume.model_validate(parsed)
    except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as exc:
        logger.error(
            "resume_llm_failed",
            extra={"error_type": type(exc).__name__, "error_message": str(exc)},
        )
        raise UpstreamError("Failed to parse resume") from exc


# ---------------------------------------------------------------------------
# Candidate creation
# ---------------------------------------------------------------------------

def build_candidate(parsed: ParsedResume) -> CandidateCreate:
    """Map a parsed resume onto a new active candidate with default rates."""
    return CandidateCreate(
        initials=derive_initials(parsed.full_name),
        full_name=parsed.full_name,
        title=parsed.title,
        location=parsed.location,
        skills=parsed.skills,
        experience_years=parsed.experience_years,
        bio=parsed.bio,
        education=parsed.education,
        availability=DEFAULT_AVAILABILITY,
        contact_email=parsed.email,
        contact_phone=parsed.phone,
        certifications=parsed.certifications,
        bill_rate=settings.DEFAULT_BILL_RATE,
        pay_rate=settings.DEFAULT_PAY_RATE,
        is_active=True,
    )


async def create_candidate_from_resume(
    client: Client,
    content: bytes,
    content_type: str | None,
    filename: str | None = None,
) -> Candidate:
    """Extract, parse and store a resume as a new candidate.

    PDF parsing and the storage insert are blocking, so they run in the
    threadpool; only the LLM call is awaited on the event loop.
    """
    text = await run_in_threadpool(extract_text, content, content_type)
    parsed = await parse_resume(text)
    candidate = await run_in_threadpool(
        candidate_service.create, client, build_candidate(parsed)
    )
    logger.info(
        "resume_candidate_created",
        extra={"candidate_id": candidate.id, "upload_filename": filename or ""},
    )
    return candidate
