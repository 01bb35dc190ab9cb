"""Free-text candidate query interpretation.

A search string such as ``"React developer with 3+ years of experience"`` is
turned into structured criteria by three independent extractors:

* ``ExperienceExtractor``  -> minimum years of experience
* ``SkillExtractor``       -> known skill keywords mentioned in the text
* ``AvailabilityExtractor`` -> an availability phrase ("immediate", "2 weeks")

When any extractor finds something, candidates are filtered by the extracted
criteria (AND across criteria, any-match within skills).  Otherwise the whole
query is matched as a substring against the candidate's text fields.

Everything here is pure: callers fetch the candidate rows and pass them in.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from app.core.constants import SKILL_VOCABULARY
from app.models.candidate import Candidate

T_co = TypeVar("T_co", covariant=True)


class Extractor(Protocol[T_co]):
    """Pulls one kind of signal out of a lower-cased query."""

    def extract(self, text: str) -> T_co | None: ...


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------

_EXPERIENCE_PATTERN = re.compile(
    r"(\d+)\s*\+?\s*(?:years?|yrs?)\s*(?:of\s*)?(?:experience|exp)?"
    r"|\b(?:over|more\s+than)\s+(\d+)\s*(?:years?|yrs?)",
    re.IGNORECASE,
)

_AVAILABILITY_PATTERN = re.compile(
    r"\b(immediate|immediately|available\s+now|\d+\s*(?:week|wk|day|month|mth)s?)"
    r"(?:\s+availability)?\b",
    re.IGNORECASE,
)


class ExperienceExtractor:
    """First ``"<N>+ years"`` / ``"over <N> years"`` match wins."""

    pattern = _EXPERIENCE_PATTERN

    def extract(self, text: str) -> int | None:
        match = self.pattern.search(text)
        if match is None:
            return None
        return int(match.group(1) or match.group(2))


class SkillExtractor:
    """Whole-word matches against a fixed keyword vocabulary.

    Matches are lower-cased and de-duplicated, keeping first-occurrence
    order.
    """

    def __init__(self, vocabulary: Iterable[str] = SKILL_VOCABULARY) -> None:
        self.vocabulary = [v.lower() for v in vocabulary]
        # Longest first so a term is never cut short by its prefix ("c" vs "c++");
        # entries may start or end with a symbol ("c#", ".net")
        ordered = sorted(self.vocabulary, key=len, reverse=True)
        alternation = "|".join(re.escape(v) for v in ordered)
        self.pattern = re.compile(rf"(?<!\w)({alternation})(?!\w)", re.IGNORECASE)

    def extract(self, text: str) -> list[str] | None:
        found: list[str] = []
        for match in self.pattern.finditer(text):
            skill = match.group(0).lower()
            if skill not in found:
                found.append(skill)
        return found or None


class AvailabilityExtractor:
    """First availability phrase, lower-cased."""

    pattern = _AVAILABILITY_PATTERN

    def extract(self, text: str) -> str | None:
        match = self.pattern.search(text)
        if match is None:
            return None
        return match.group(0).lower()


# ---------------------------------------------------------------------------
# Criteria
# ---------------------------------------------------------------------------

@dataclass
class SearchCriteria:
    """Structured criteria extracted from a free-text query."""
    query: str
    skills: list[str] = field(default_factory=list)
    min_experience: int | None = None
    availability: str | None = None

    @property
    def is_structured(self) -> bool:
        return bool(self.skills) or self.min_experience is not None or self.availability is not None

    @property
    def search_type(self) -> str:
        """Label recorded with search analytics."""
        kinds = [
            name
            for name, present in (
                ("skills", bool(self.skills)),
                ("experience", self.min_experience is not None),
                ("availability", self.availability is not None),
            )
            if present
        ]
        if not kinds:
            return "general"
        if len(kinds) == 1:
            return kinds[0]
        return "combined"


class QueryInterpreter:
    """Turns free text into ``SearchCriteria`` and applies them."""

    def __init__(
        self,
        experience: Extractor[int] | None = None,
        skills: Extractor[list[str]] | None = None,
        availability: Extractor[str] | None = None,
    ) -> None:
        self.experience = experience or ExperienceExtractor()
        self.skills = skills or SkillExtractor()
        self.availability = availability or AvailabilityExtractor()

    def interpret(self, query: str) -> SearchCriteria:
        text = query.strip().lower()
        if not text:
            return SearchCriteria(query="")
        return SearchCriteria(
            query=text,
            skills=self.skills.extract(text) or [],
            min_experience=self.experience.extract(text),
            availability=self.availability.extract(text),
        )

    def apply(
        self,
        criteria: SearchCriteria,
        candidates: Sequence[Candidate],
    ) -> list[Candidate]:
        """Filter *candidates* by *criteria*.  Inactive candidates never pass."""
        active = [c for c in candidates if c.is_active]
        if not criteria.query:
            return active
        if criteria.is_structured:
            return [c for c in active if matches_criteria(c, criteria)]
        return [c for c in active if matches_text(c, criteria.query)]

    def search(self, query: str, candidates: Sequence[Candidate]) -> list[Candidate]:
        return self.apply(self.interpret(query), candidates)


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

def has_any_skill(candidate: Candidate, wanted: Iterable[str]) -> bool:
    """True if any wanted skill is a case-insensitive substring of any candidate skill."""
    owned = [s.lower() for s in candidate.skills]
    return any(w.lower() in skill for w in wanted for skill in owned)


def matches_criteria(candidate: Candidate, criteria: SearchCriteria) -> bool:
    if criteria.skills and not has_any_skill(candidate, criteria.skills):
        return False
    if criteria.min_experience is not None and candidate.experience_years < criteria.min_experience:
        return False
    if criteria.availability and criteria.availability not in candidate.availability.lower():
        return False
    return True


def matches_text(candidate: Candidate, needle: str) -> bool:
    """Substring match over name, title, location, bio, education and skills."""
    needle = needle.lower()
    fields = (
        candidate.full_name,
        candidate.title,
        candidate.location,
        candidate.bio,
        candidate.education,
    )
    if any(needle in (value or "").lower() for value in fields):
        return True
    return any(needle in skill.lower() for skill in candidate.skills)


def filter_candidates(
    candidates: Sequence[Candidate],
    skills: Sequence[str] | None = None,
    min_experience: int | None = None,
    availability: str | None = None,
) -> list[Candidate]:
    """Explicit UI filters.

    Unlike free-text search this does not restrict to active candidates, and
    availability must match exactly (case-insensitive).
    """
    if not skills and min_experience is None and not availability:
        return list(candidates)

    result: list[Candidate] = []
    for candidate in candidates:
        if skills and not has_any_skill(candidate, skills):
            continue
        if min_experience is not None and candidate.experience_years < min_experience:
            continue
        if availability and candidate.availability.lower() != availability.lower():
            continue
        result.append(candidate)
    return result
