"""Tests for resume text extraction, LLM parsing, and candidate creation."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.errors import InvalidInputError, UpstreamError
from app.services.resume import (
    RESUME_SYSTEM_PROMPT,
    ParsedResume,
    build_candidate,
    derive_initials,
    extract_text,
    parse_resume,
)


def _llm_response(content: Any) -> MagicMock:
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.raise_for_status = MagicMock()
    mock_response.json.return_value = {"choices": [{"message": {"content": content}}]}
    return mock_response


def _patched_async_client(post: AsyncMock) -> Any:
    mock_client = AsyncMock()
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client.post = post
    return mock_client


class TestDeriveInitials:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Jane Doe", "JD"),
            ("jane quinn doe", "JD"),
            ("Cher", "C"),
            ("   ", "?"),
        ],
    )
    def test_initials(self, name: str, expected: str) -> None:
        assert derive_initials(name) == expected


class TestParsedResume:
    def test_missing_fields_use_defaults(self) -> None:
        parsed = ParsedResume.model_validate({})

        assert parsed.full_name == "Unknown"
        assert parsed.title == "Professional"
        assert parsed.skills == []
        assert parsed.experience_years == 0

    def test_malformed_values_are_coerced(self) -> None:
        parsed = ParsedResume.model_validate({
            "fullName": "  ",
            "skills": "Python, Go",
            "experienceYears": "about ten",
            "email": None,
            "certifications": ["AWS", ""],
        })

        assert parsed.full_name == "Unknown"
        assert parsed.skills == []
        assert parsed.experience_years == 0
        assert parsed.email == ""
        assert parsed.certifications == ["AWS"]

    def test_float_experience_truncated(self) -> None:
        assert ParsedResume.model_validate({"experienceYears": 6.8}).experience_years == 6


class TestExtractText:
    def test_plain_text(self) -> None:
        text = extract_text("Jane Doe\nPython developer".encode(), "text/plain; charset=utf-8")
        assert text.startswith("Jane Doe")

    def test_unsupported_type(self) -> None:
        with pytest.raises(InvalidInputError, match="Only PDF and plain text"):
            extract_text(b"data", "application/msword")

    def test_missing_type(self) -> None:
        with pytest.raises(InvalidInputError):
            extract_text(b"data", None)

    def test_too_large(self) -> None:
        with patch.object(settings, "MAX_RESUME_BYTES", 8):
            with pytest.raises(InvalidInputError, match="too large"):
                extract_text(b"123456789", "text/plain")

    def test_blank_text(self) -> None:
        with pytest.raises(InvalidInputError, match="No text"):
            extract_text(b"  \n ", "text/plain")

    def test_pdf_pages_joined(self) -> None:
        pages = [MagicMock(), MagicMock(), MagicMock()]
        pages[0].extract_text.return_value = "Jane Doe"
        pages[1].extract_text.return_value = None
        pages[2].extract_text.return_value = "Skills: Python"
        pdf = MagicMock()
        pdf.__enter__.return_value.pages = pages

        with patch("app.services.resume.pdfplumber.open", return_value=pdf):
            text = extract_text(b"%PDF-1.4", "application/pdf")

        assert text == "Jane Doe\n\nSkills: Python"

    def test_corrupt_pdf(self) -> None:
        with pytest.raises(InvalidInputError, match="Could not read PDF"):
            extract_text(b"this is not a pdf", "application/pdf")


class TestParseResume:
    @pytest.mark.asyncio
    async def test_returns_parsed_fields(self) -> None:
        content = json.dumps({
            "fullName": "Jane Doe",
            "title": "Data Engineer",
            "skills": ["Python", "Spark"],
            "experienceYears": 7,
        })
        post = AsyncMock(return_value=_llm_response(content))

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = _patched_async_client(post)
            parsed = await parse_resume("Jane Doe resume text")

        assert parsed.full_name == "Jane Doe"
        assert parsed.skills == ["Python", "Spark"]
        assert parsed.location == "Location TBD"

        request_json = post.call_args.kwargs["json"]
        assert request_json["model"] == settings.LLM_MODEL
        assert request_json["response_format"] == {"type": "json_object"}
        assert request_json["messages"][0]["content"] == RESUME_SYSTEM_PROMPT
        assert "Jane Doe resume text" in request_json["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_http_error_is_upstream_error(self) -> None:
        post = AsyncMock(side_effect=httpx.HTTPError("Connection timeout"))

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = _patched_async_client(post)
            with pytest.raises(UpstreamError):
                await parse_resume("text")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["not json", "[1, 2]", None])
    async def test_bad_content_is_upstream_error(self, content: Any) -> None:
        post = AsyncMock(return_value=_llm_response(content))

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = _patched_async_client(post)
            if content is None:
                # Empty content is treated as an empty object
                parsed = await parse_resume("text")
                assert parsed.full_name == "Unknown"
            else:
                with pytest.raises(UpstreamError):
                    await parse_resume("text")


class TestBuildCandidate:
    def test_defaults_applied(self) -> None:
        parsed = ParsedResume(
            full_name="Jane Doe",
            email="jane@talent.io",
            phone="",
            skills=[],
            experience_years=4,
        )

        candidate = build_candidate(parsed)

        assert candidate.initials == "JD"
        assert candidate.availability == "Immediate"
        assert candidate.bill_rate == settings.DEFAULT_BILL_RATE
        assert candidate.pay_rate == settings.DEFAULT_PAY_RATE
        assert candidate.is_active is True
        assert candidate.skills == ["None"]
        assert candidate.contact_email == "jane@talent.io"
        assert candidate.contact_phone is None


class TestCreateCandidateFromResume:
    @pytest.mark.asyncio
    async def test_logs_upload_filename(
        self,
        caplog: pytest.LogCaptureFixture,
        table_mock: Callable[..., MagicMock],
        candidate_row: Callable[..., dict[str, Any]],
    ) -> None:
        from app.services.resume import create_candidate_from_resume

        client = MagicMock()
        client.table.return_value = table_mock([candidate_row(id=21)])
        parsed = ParsedResume(full_name="Jane Doe")

        with patch("app.services.resume.parse_resume", new=AsyncMock(return_value=parsed)):
            with caplog.at_level(logging.INFO, logger="app.services.resume"):
                candidate = await create_candidate_from_resume(
                    client, b"Jane Doe", "text/plain", "resume.txt"
                )

        assert candidate.id == 21
        record = next(r for r in caplog.records if r.getMessage() == "resume_candidate_created")
        assert record.upload_filename == "resume.txt"
        assert record.candidate_id == 21

    @pytest.mark.asyncio
    async def test_storage_insert_does_not_block_event_loop(
        self,
        table_mock: Callable[..., MagicMock],
        candidate_row: Callable[..., dict[str, Any]],
    ) -> None:
        """Given a slow insert, other coroutines keep running meanwhile."""
        from app.services.resume import create_candidate_from_resume

        def slow_insert() -> MagicMock:
            time.sleep(0.3)
            return MagicMock(data=[candidate_row(id=5)])

        table = table_mock()
        table.execute.side_effect = slow_insert
        client = MagicMock()
        client.table.return_value = table
        done = asyncio.Event()
        ticks = 0

        async def upload() -> Any:
            try:
                return await create_candidate_from_resume(client, b"Jane Doe", "text/plain")
            finally:
                done.set()

        async def ticker() -> None:
            nonlocal ticks
            while not done.is_set():
                ticks += 1
                await asyncio.sleep(0.01)

        with patch(
            "app.services.resume.parse_resume",
            new=AsyncMock(return_value=ParsedResume(full_name="Jane Doe")),
        ):
            candidate, _ = await asyncio.gather(upload(), ticker())

        assert candidate.id == 5
        assert ticks >= 10


class TestParseResumeEndpoint:
    def test_creates_candidate(
        self,
        test_client: TestClient,
        mock_supabase: MagicMock,
        table_mock: Callable[..., MagicMock],
        candidate_row: Callable[..., dict[str, Any]],
    ) -> None:
        table = table_mock([candidate_row(id=21, full_name="Jane Doe")])
        mock_supabase.table.return_value = table
        parsed = ParsedResume(full_name="Jane Doe", skills=["Python"], experience_years=3)

        with patch(
            "app.services.resume.parse_resume", new=AsyncMock(return_value=parsed)
        ) as mock_parse:
            response = test_client.post(
                "/api/candidates/parse-resume",
                files={"file": ("resume.txt", b"Jane Doe\nPython, 3 years", "text/plain")},
            )

        assert response.status_code == 201
        assert response.json()["id"] == 21
        assert "Python, 3 years" in mock_parse.call_args.args[0]
        inserted = table.insert.call_args.args[0]
        assert inserted["availability"] == "Immediate"
        assert inserted["initials"] == "JD"

    def test_rejects_unsupported_type(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/api/candidates/parse-resume",
            files={"file": ("resume.docx", b"PK\x03\x04", "application/vnd.ms-word")},
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Only PDF and plain text resumes are supported"}

    def test_missing_file(self, test_client: TestClient) -> None:
        response = test_client.post("/api/candidates/parse-resume")
        assert response.status_code == 400

    def test_llm_failure_returns_502(self, test_client: TestClient) -> None:
        with patch(
            "app.services.resume.parse_resume",
            new=AsyncMock(side_effect=UpstreamError("Failed to parse resume")),
        ):
            response = test_client.post(
                "/api/candidates/parse-resume",
                files={"file": ("resume.txt", b"Jane Doe", "text/plain")},
            )

        assert response.status_code == 502
        assert response.json() == {"message": "Failed to parse resume"}
