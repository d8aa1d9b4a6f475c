"""GitHub REST API adapter — implements the MetadataFetcher port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import assert_never

import httpx

from repo_resolver.domain.entities import RepoReference, RepoVisibility
from repo_resolver.domain.exceptions import (
    ProviderApiError,
    RateLimitExceededError,
    RepositoryNotFoundError,
)
from repo_resolver.domain.value_objects import (
    AppAuthPending,
    AppInstallationToken,
    AuthOutcome,
    Bearer,
    NoAuth,
)

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"


class GitHubRestAdapter:
    """Concrete MetadataFetcher backed by the GitHub v3 REST API."""

    def __init__(self, client: httpx.AsyncClient, api_url: str = _GITHUB_API) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")

    async def fetch_metadata(
        self, ref: RepoReference, auth: AuthOutcome
    ) -> RepoVisibility:
        """GET /repos/{owner}/{repo} → RepoVisibility."""
        url = f"{self._api_url}/repos/{ref.owner}/{ref.repo}"
        try:
            resp = await self._client.get(url, headers=build_headers(auth))
        except httpx.HTTPError as exc:
            raise ProviderApiError(None, f"Network error fetching {url}: {exc}") from exc

        if resp.status_code == 200:
            return _parse_repository(resp)

        if resp.status_code == 404:
            raise RepositoryNotFoundError(ref.owner, ref.repo)

        remaining = resp.headers.get("x-ratelimit-remaining")
        if resp.status_code == 403 and remaining == "0":
            raise RateLimitExceededError(
                reset_at=parse_reset(resp.headers.get("x-ratelimit-reset")),
                remaining=remaining,
            )

        raise ProviderApiError(resp.status_code, resp.text)


def build_headers(auth: AuthOutcome) -> dict[str, str]:
    """Request headers for *auth*; only usable tokens add ``Authorization``."""
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": "repo-resolver/1.0",
    }
    if isinstance(auth, (Bearer, AppInstallationToken)):
        headers["Authorization"] = f"Bearer {auth.token}"
    elif isinstance(auth, (NoAuth, AppAuthPending)):
        pass
    else:
        assert_never(auth)
    return headers


def parse_reset(raw: str | None) -> datetime | None:
    """Convert an ``x-ratelimit-reset`` epoch-seconds header to a UTC datetime."""
    if not raw:
        return None
    try:
        return datetime.fromtimestamp(int(raw), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        logger.debug("Unparseable x-ratelimit-reset header: %r", raw)
        return None


def _parse_repository(resp: httpx.Response) -> RepoVisibility:
    try:
        data = resp.json()
    except ValueError as exc:
        raise ProviderApiError(resp.status_code, "Malformed JSON in repository response") from exc
    if not isinstance(data, dict):
        raise ProviderApiError(resp.status_code, "Unexpected repository response shape")

    return RepoVisibility(
        is_private=bool(data.get("private", False)),
        description=data.get("description"),
        default_branch=data.get("default_branch"),
        visibility=data.get("visibility"),
        fork=data.get("fork"),
        html_url=data.get("html_url"),
    )
