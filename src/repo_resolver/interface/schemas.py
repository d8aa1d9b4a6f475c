"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from repo_resolver.domain.entities import MetadataWarning, ResolutionResult


class ResolveRequest(BaseModel):
    """Request body for ``POST /repo``."""

    url: str
    auth_token: str | None = None

    @field_validator("url")
    @classmethod
    def _must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "url must not be empty."
            raise ValueError(msg)
        return v


class RepoMetadataOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    owner: str
    repo: str
    branch: str | None = None
    commit: str | None = None
    provider: str
    is_private: bool = Field(alias="isPrivate")


class WarningOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: str
    message: str
    status: int | None = None
    rate_limit_remaining: str | None = Field(default=None, alias="rateLimitRemaining")
    rate_limit_reset: datetime | None = Field(default=None, alias="rateLimitReset")

    @classmethod
    def from_domain(cls, warning: MetadataWarning) -> WarningOut:
        return cls(
            kind=warning.kind.value,
            message=warning.message,
            status=warning.status,
            rate_limit_remaining=warning.rate_limit_remaining,
            rate_limit_reset=warning.rate_limit_reset,
        )


class ResolveResponse(BaseModel):
    """Successful response from ``POST /repo``."""

    model_config = ConfigDict(populate_by_name=True)

    metadata: RepoMetadataOut
    normalized_url: str = Field(alias="normalizedUrl")
    original_url: str = Field(alias="originalUrl")
    warnings: list[WarningOut] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, result: ResolutionResult) -> ResolveResponse:
        meta = result.metadata
        return cls(
            metadata=RepoMetadataOut(
                owner=meta.owner,
                repo=meta.repo,
                branch=meta.branch,
                commit=meta.commit,
                provider=meta.provider.value,
                is_private=meta.is_private,
            ),
            normalized_url=result.normalized_url,
            original_url=result.original_url,
            warnings=[WarningOut.from_domain(w) for w in result.warnings],
        )


class GitHubAppAuthRequest(BaseModel):
    """Request body for ``POST /auth/github-app``."""

    app_id: str
    private_key: str
    client_id: str
    client_secret: str
    installation_id: str | None = None


class GitHubAppAuthResponse(BaseModel):
    """Either an installation token, or the URL where the App must be installed."""

    type: Literal["installation", "app"]
    token: str | None = None
    expires_at: datetime | None = None
    installation_url: str | None = None


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    code: str
    message: str
    installation_url: str | None = None
