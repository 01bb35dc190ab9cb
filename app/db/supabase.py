"""Supabase client lifecycle.

``create_supabase_client()`` is called once from the FastAPI lifespan and the
client is kept on ``app.state.supabase``.  Request handlers receive it through
the ``get_supabase`` dependency and pass it explicitly to service functions.
Full-table reads go through ``fetch_all`` so no rows are lost to the
server-side row cap.
"""

from collections.abc import Callable
from typing import Any

from fastapi import Request
from supabase import Client, create_client

from app.core.config import settings


def create_supabase_client() -> Client:
    """Build a Supabase client from ``settings``."""
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


def get_supabase(request: Request) -> Client:
    """FastAPI dependency returning the application's Supabase client."""
    return request.app.state.supabase


# PostgREST caps a response at its ``max-rows`` setting (1000 by default);
# the page size must not exceed it
PAGE_SIZE = 1000


def fetch_all(build_query: Callable[[], Any], page_size: int = PAGE_SIZE) -> list[dict[str, Any]]:
    """Read every row of a query in ``page_size`` slices.

    *build_query* returns a fresh, ordered query builder for each page; the
    loop stops at the first page shorter than ``page_size``.
    """
    rows: list[dict[str, Any]] = []
    start = 0
    while True:
        page = build_query().range(start, start + page_size - 1).execute().data or []
        rows.extend(page)
        if len(page) < page_size:
            return rows
        start += page_size
