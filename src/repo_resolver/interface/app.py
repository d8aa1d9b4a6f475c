"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from repo_resolver.infrastructure.config import Settings
from repo_resolver.interface.dependencies import get_app_settings, shutdown, startup
from repo_resolver.interface.error_handlers import register_error_handlers
from repo_resolver.interface.routes import router

logger = logging.getLogger(__name__)


def server_auth_mode(settings: Settings) -> str:
    """Name the credentials ``POST /repo`` falls back to when a request has none."""
    if settings.github_app() is not None:
        if settings.github_app_installation_id:
            return "github-app"
        return "github-app (not installed)"
    if settings.github_token is not None:
        return "token"
    return "anonymous"


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the shared HTTP client and report the server-side auth mode."""
    await startup()
    # Honour test overrides so the reported mode matches what routes will use.
    settings = app.dependency_overrides.get(get_app_settings, get_app_settings)()
    logger.info("Repository resolver ready, server-side auth: %s", server_auth_mode(settings))
    yield
    await shutdown()


def create_app() -> FastAPI:
    """Build and wire the FastAPI application."""
    app = FastAPI(
        title="Repository Resolver",
        version="1.0.0",
        description=(
            "Normalizes a GitHub, GitLab or Bitbucket repository reference and "
            "reports whether the repository is private."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
