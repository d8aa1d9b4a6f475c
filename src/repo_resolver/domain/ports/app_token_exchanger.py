"""Port: GitHub App token exchange — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_resolver.domain.value_objects import AppInstallationToken, GitHubAppConfig


class AppTokenExchanger(Protocol):
    """Abstract contract for turning App credentials into usable tokens."""

    def create_app_token(self, app: GitHubAppConfig) -> str:
        """Return a short-lived app-level token (a signed JWT)."""
        ...

    async def create_installation_token(
        self, app: GitHubAppConfig, app_token: str, installation_id: str
    ) -> AppInstallationToken:
        """Exchange the app-level token for an installation-scoped token."""
        ...
