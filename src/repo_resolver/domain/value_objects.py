"""Value objects — authentication inputs and the resolved auth outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class GitHubAppConfig:
    """Credentials of a GitHub App, optionally bound to one installation."""

    app_id: str
    private_key: str = field(repr=False)
    client_id: str
    client_secret: str = field(repr=False)
    installation_id: str | None = None


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """Caller-supplied credentials.

    Both fields may be set; ``github_app`` always takes precedence over
    ``token`` when the strategy is resolved.
    """

    github_app: GitHubAppConfig | None = None
    token: str | None = field(default=None, repr=False)


# ── Resolved authentication outcome ─────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class NoAuth:
    """No credential is attached to outgoing requests."""


@dataclass(frozen=True, slots=True)
class Bearer:
    """A personal access token sent as ``Authorization: Bearer``."""

    token: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class AppInstallationToken:
    """An installation-scoped token minted from GitHub App credentials."""

    token: str = field(repr=False)
    expires_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class AppAuthPending:
    """App credentials are valid but the App is not installed yet."""

    installation_url: str


AuthOutcome = NoAuth | Bearer | AppInstallationToken | AppAuthPending
