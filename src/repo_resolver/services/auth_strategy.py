"""Authentication strategy — pick exactly one way to authenticate a request.

Strict priority cascade: GitHub App credentials, then a personal access
token, then nothing.
"""

from __future__ import annotations

import logging

from repo_resolver.domain.exceptions import (
    AppAuthFailedError,
    InvalidTokenFormatError,
)
from repo_resolver.domain.ports.app_token_exchanger import AppTokenExchanger
from repo_resolver.domain.value_objects import (
    AppAuthPending,
    AuthConfig,
    AuthOutcome,
    Bearer,
    GitHubAppConfig,
    NoAuth,
)

logger = logging.getLogger(__name__)

PERSONAL_TOKEN_PREFIXES: tuple[str, ...] = ("ghp_", "github_pat_")


class AuthStrategyResolver:
    """Resolve an :class:`AuthConfig` into a single :class:`AuthOutcome`.

    Parameters
    ----------
    exchanger:
        Adapter that mints App JWTs and installation tokens.
    installation_url:
        Where users go to install the GitHub App; returned inside
        :class:`AppAuthPending` when no installation is configured.
    """

    def __init__(self, exchanger: AppTokenExchanger, installation_url: str) -> None:
        if not installation_url:
            raise ValueError("installation_url must not be empty.")
        self._exchanger = exchanger
        self._installation_url = installation_url

    async def resolve(self, config: AuthConfig) -> AuthOutcome:
        """Return the outcome for *config*.

        Raises :class:`InvalidTokenFormatError` for a malformed personal token
        and :class:`AppAuthFailedError` when the App token exchange fails.
        """
        if config.github_app is not None:
            return await self._resolve_app(config.github_app)

        if config.token:
            validate_token_format(config.token)
            return Bearer(token=config.token)

        return NoAuth()

    async def _resolve_app(self, app: GitHubAppConfig) -> AuthOutcome:
        try:
            app_token = self._exchanger.create_app_token(app)
        except AppAuthFailedError:
            raise
        except Exception as exc:
            raise AppAuthFailedError(f"GitHub App authentication failed: {exc}") from exc

        if not app.installation_id:
            logger.info("GitHub App %s has no installation configured", app.app_id)
            return AppAuthPending(installation_url=self._installation_url)

        try:
            return await self._exchanger.create_installation_token(
                app, app_token, app.installation_id
            )
        except AppAuthFailedError:
            raise
        except Exception as exc:
            raise AppAuthFailedError(f"GitHub App authentication failed: {exc}") from exc


def validate_token_format(token: str) -> None:
    """Reject tokens that are not GitHub personal access tokens."""
    if not token.startswith(PERSONAL_TOKEN_PREFIXES):
        raise InvalidTokenFormatError(
            "Invalid GitHub token format. "
            "Token should be a GitHub Personal Access Token."
        )
