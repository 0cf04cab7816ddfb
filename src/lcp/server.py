"""FastAPI application factory and server configuration."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lcp.clients.upstream import UpstreamClient
from lcp.config import Settings, get_settings
from lcp.errors import register_error_handlers
from lcp.logging_config import configure_logging
from lcp.middleware import AccessLogMiddleware, RequestIDMiddleware
from lcp.routes import auth, problems, submissions
from lcp.schemas.common import HealthResponse
from lcp.services.session_store import InMemorySessionStore, SessionStore

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    yield

    # Shutdown
    await app.state.upstream.aclose()


def create_app(
    settings: Optional[Settings] = None,
    session_store: Optional[SessionStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_store = (
        session_store if session_store is not None else InMemorySessionStore()
    )
    app.state.upstream = UpstreamClient(settings, transport=transport)

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_error_handlers(app)

    # Routes
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(problems.router, prefix="/api", tags=["problems"])
    app.include_router(submissions.router, prefix="/api", tags=["submissions"])

    # Health check
    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        return HealthResponse()

    @app.get("/")
    async def root():
        return JSONResponse(
            content={
                "service": settings.app_name,
                "version": VERSION,
                "docs": "/docs" if settings.debug else None,
            }
        )

    return app


app = create_app()
