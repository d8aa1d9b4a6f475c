"""GitHub App adapter — implements the AppTokenExchanger port."""

from __future__ import annotations

import base64
import binascii
import logging
import time
from datetime import datetime

import httpx
import jwt

from repo_resolver.domain.exceptions import AppAuthFailedError
from repo_resolver.domain.value_objects import AppInstallationToken, GitHubAppConfig

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_PEM_HEADER = "-----BEGIN"


class GitHubAppAdapter:
    """Concrete AppTokenExchanger backed by the GitHub Apps REST API."""

    def __init__(self, client: httpx.AsyncClient, api_url: str = _GITHUB_API) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")

    def create_app_token(self, app: GitHubAppConfig) -> str:
        """Sign a 10-minute RS256 JWT identifying the App."""
        now = int(time.time())
        payload = {
            "iat": now - 60,  # clock drift allowance
            "exp": now + (10 * 60),
            "iss": app.app_id,
        }
        try:
            return jwt.encode(payload, decode_private_key(app.private_key), algorithm="RS256")
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise AppAuthFailedError(
                f"GitHub App authentication failed: could not sign app token ({exc})"
            ) from exc

    async def create_installation_token(
        self, app: GitHubAppConfig, app_token: str, installation_id: str
    ) -> AppInstallationToken:
        """POST /app/installations/{id}/access_tokens → AppInstallationToken."""
        url = f"{self._api_url}/app/installations/{installation_id}/access_tokens"
        try:
            resp = await self._client.post(
                url,
                headers={
                    "Authorization": f"Bearer {app_token}",
                    "Accept": "application/vnd.github+json",
                    "User-Agent": "repo-resolver/1.0",
                },
            )
        except httpx.HTTPError as exc:
            raise AppAuthFailedError(
                f"GitHub App authentication failed: network error ({exc})"
            ) from exc

        if resp.status_code not in (200, 201):
            raise AppAuthFailedError(
                f"GitHub App authentication failed: HTTP {resp.status_code} "
                f"for installation {installation_id}: {resp.text}"
            )

        try:
            data = resp.json()
            token = data["token"]
        except (ValueError, KeyError, TypeError) as exc:
            raise AppAuthFailedError(
                "GitHub App authentication failed: malformed token response"
            ) from exc

        logger.debug("Minted installation token for app %s", app.app_id)
        return AppInstallationToken(
            token=token,
            expires_at=_parse_expiry(data.get("expires_at")),
        )


def decode_private_key(value: str) -> str:
    """Accept a PEM key as-is, or a base64-encoded PEM key."""
    if value.lstrip().startswith(_PEM_HEADER):
        return value
    try:
        return base64.b64decode(value, validate=True).decode()
    except (binascii.Error, UnicodeDecodeError):
        # Not base64; the signer reports the bad key.
        return value


def _parse_expiry(raw: object) -> datetime | None:
    if not isinstance(raw, str):
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        logger.debug("Unparseable installation token expiry: %r", raw)
        return None
