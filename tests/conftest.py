"""Shared test fixtures.

Provides a chainable mock Supabase client, a ``test_client`` for FastAPI
with that mock installed on ``app.state``, and a candidate row factory.
"""

import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")

CHAIN_METHODS = (
    "select", "insert", "upsert", "update", "delete", "eq", "in_",
    "limit", "order", "is_", "range",
)


def chainable_table_mock(data: list[dict[str, Any]] | None = None, count: int | None = None) -> MagicMock:
    """Return a table mock supporting fluent chaining ending in ``execute()``."""
    m = MagicMock()
    for method in CHAIN_METHODS:
        getattr(m, method).return_value = m
    m.execute.return_value = MagicMock(data=data or [], count=count)
    return m


@pytest.fixture()
def table_mock() -> Callable[..., MagicMock]:
    return chainable_table_mock


@pytest.fixture()
def mock_supabase() -> MagicMock:
    """A Supabase client mock whose tables return no rows by default."""
    client = MagicMock()
    client.table.return_value = chainable_table_mock()
    return client


@pytest.fixture()
def test_client(mock_supabase: MagicMock) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient backed by ``mock_supabase``."""
    from app.main import app

    app.state.supabase = mock_supabase
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def candidate_row() -> Callable[..., dict[str, Any]]:
    """Factory for a ``candidates`` row as returned by Supabase."""

    def _make(**overrides: Any) -> dict[str, Any]:
        row: dict[str, Any] = {
            "id": 1,
            "initials": "JD",
            "full_name": "Jane Doe",
            "profile_image_url": None,
            "title": "Senior Frontend Engineer",
            "location": "Austin, TX",
            "skills": ["React", "TypeScript"],
            "experience_years": 5,
            "bio": "Builds accessible web apps.",
            "education": "BS Computer Science, UT Austin",
            "availability": "Immediate",
            "contact_email": "jane@example.com",
            "contact_phone": None,
            "certifications": [],
            "bill_rate": 120,
            "pay_rate": 80,
            "is_active": True,
            "created_at": "2025-01-15T10:00:00+00:00",
        }
        row.update(overrides)
        return row

    return _make
