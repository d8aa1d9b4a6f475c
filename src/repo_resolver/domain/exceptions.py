"""Domain exception hierarchy.

Each exception carries a stable ``code`` that the interface layer maps to an
HTTP status.  Inner layers raise these; the outermost error-handler
translates them.
"""

from __future__ import annotations

from datetime import datetime


class RepoResolverError(Exception):
    """Base exception for the entire application."""

    code = "INTERNAL_ERROR"


# ── Input validation ────────────────────────────────────────────────────────


class InvalidFormatError(RepoResolverError):
    """The input is neither an absolute URL nor an ``owner/repo`` shorthand."""

    code = "INVALID_REPOSITORY_URL"


class MissingOwnerOrRepoError(RepoResolverError):
    """The URL parsed, but has no owner or repository path segment."""

    code = "INVALID_REPOSITORY_URL"


# ── Authentication ──────────────────────────────────────────────────────────


class InvalidTokenFormatError(RepoResolverError):
    """The bearer token does not look like a GitHub personal access token."""

    code = "INVALID_TOKEN"


class AppAuthFailedError(RepoResolverError):
    """Exchanging GitHub App credentials for a token failed."""

    code = "APP_AUTH_FAILED"


class AppInstallationRequiredError(RepoResolverError):
    """The GitHub App is valid but not installed; the user must install it."""

    code = "APP_INSTALLATION_REQUIRED"

    def __init__(self, installation_url: str) -> None:
        super().__init__(
            f"GitHub App installation required. Install it at {installation_url}"
        )
        self.installation_url = installation_url


# ── Provider API errors ─────────────────────────────────────────────────────


class RepositoryNotFoundError(RepoResolverError):
    """The repository does not exist or is not visible to us (404)."""

    code = "REPOSITORY_NOT_FOUND"

    def __init__(self, owner: str, repo: str) -> None:
        super().__init__(f"Repository not found: {owner}/{repo}")
        self.owner = owner
        self.repo = repo


class RateLimitExceededError(RepoResolverError):
    """GitHub API rate limit exceeded (403 with zero remaining quota)."""

    code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, reset_at: datetime | None, remaining: str = "0") -> None:
        reset_str = reset_at.isoformat() if reset_at else "unknown"
        super().__init__(f"GitHub API rate limit exceeded. Reset at {reset_str}")
        self.reset_at = reset_at
        self.remaining = remaining


class ProviderApiError(RepoResolverError):
    """Any other failed call to the provider API."""

    code = "PROVIDER_API_ERROR"

    def __init__(self, status: int | None, body: str) -> None:
        label = status if status is not None else "network error"
        super().__init__(f"GitHub API Error: {label} - {body}")
        self.status = status
        self.body = body
