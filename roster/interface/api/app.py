"""FastAPI application."""

from contextlib import asynccontextmanager

import logfire
from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roster.config import Settings
from roster.interface.api.routes import health, invites
from roster.interface.error import register_exception_handlers
from roster.util.di.container import create_container, setup_di
from roster.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the container on shutdown, which drains background tasks."""
    yield
    logfire.info("Shutting down, draining background tasks")
    await app.state.dishka_container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.
    In tests, conftest.py does.

    Args:
        container: DI container; the production container when omitted
    """
    settings = Settings()

    # Instrument httpx for outbound calls (identity provider, email API)
    instrument_httpx()

    app_instance = FastAPI(
        title="Roster API",
        description="Organization invitations and invite-based member provisioning",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:3000",  # Local development
            "http://localhost:5173",  # Vite default
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "X-Requested-With",
        ],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    setup_di(app_instance, container or create_container())
    register_exception_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(invites.router)

    return app_instance
