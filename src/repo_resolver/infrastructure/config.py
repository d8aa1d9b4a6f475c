"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from repo_resolver.domain.value_objects import GitHubAppConfig


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_api_url: str = "https://api.github.com"
    github_token: SecretStr | None = None
    github_app_id: str | None = None
    github_app_private_key: SecretStr | None = None  # PEM or base64-encoded PEM
    github_app_client_id: str | None = None
    github_app_client_secret: SecretStr | None = None
    github_app_installation_id: str | None = None
    github_app_installation_url: str = (
        "https://github.com/apps/your-app-name/installations/new"
    )
    http_timeout_seconds: float = 30.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def github_app(self) -> GitHubAppConfig | None:
        """Return the server-wide App credentials, if fully configured."""
        if not (
            self.github_app_id
            and self.github_app_private_key
            and self.github_app_client_id
            and self.github_app_client_secret
        ):
            return None
        return GitHubAppConfig(
            app_id=self.github_app_id,
            private_key=self.github_app_private_key.get_secret_value(),
            client_id=self.github_app_client_id,
            client_secret=self.github_app_client_secret.get_secret_value(),
            installation_id=self.github_app_installation_id or None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
