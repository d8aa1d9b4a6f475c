"""FastAPI dependency injection wiring."""

from __future__ import annotations

from functools import lru_cache

import httpx

from repo_resolver.infrastructure.config import Settings, get_settings
from repo_resolver.infrastructure.github_app_adapter import GitHubAppAdapter
from repo_resolver.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_resolver.services.auth_strategy import AuthStrategyResolver
from repo_resolver.services.resolve_repo import ResolveRepoUseCase

_http_client: httpx.AsyncClient | None = None


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client  # noqa: PLW0603

    settings = get_settings()
    _http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds)
    )


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None


@lru_cache(maxsize=1)
def _settings() -> Settings:
    return get_settings()


def get_app_settings() -> Settings:
    return _settings()


def get_auth_resolver() -> AuthStrategyResolver:
    """Build the auth strategy resolver on the shared HTTP client."""
    settings = _settings()

    assert _http_client is not None, "startup() was not called"

    return AuthStrategyResolver(
        exchanger=GitHubAppAdapter(client=_http_client, api_url=settings.github_api_url),
        installation_url=settings.github_app_installation_url,
    )


def get_use_case() -> ResolveRepoUseCase:
    """Build the use-case with injected adapters."""
    settings = _settings()

    assert _http_client is not None, "startup() was not called"

    return ResolveRepoUseCase(
        auth_resolver=get_auth_resolver(),
        metadata_fetcher=GitHubRestAdapter(
            client=_http_client, api_url=settings.github_api_url
        ),
    )
