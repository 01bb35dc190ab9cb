"""FastAPI application entry point.

Configures CORS, structured logging, the JSON error envelope, lifespan
events (Supabase client creation), and router registration.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging
from app.db.supabase import create_supabase_client
from app.routers import analytics, auth, candidates, health, interests

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks.

    The Supabase client lives on ``application.state`` for the lifetime of
    the process.  A client already placed there (tests) is kept.
    """
    setup_logging()
    logger.info("Application starting up")
    if getattr(application.state, "supabase", None) is None:
        application.state.supabase = create_supabase_client()
    yield
    application.state.supabase = None
    logger.info("Application shutting down")


app = FastAPI(
    title="Talent Marketplace API",
    description="Candidate profiles, natural-language candidate search, interest requests and analytics",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(candidates.router, prefix="/api/candidates", tags=["Candidates"])
app.include_router(interests.router, prefix="/api", tags=["Interests"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["Analytics"])
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
