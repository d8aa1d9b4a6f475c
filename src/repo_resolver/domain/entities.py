"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Provider(str, Enum):
    """Known code-hosting providers.  Only GitHub is ever queried."""

    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"


PRIMARY_PROVIDER = Provider.GITHUB


class WarningKind(str, Enum):
    """Why live metadata could not be attached to a resolution."""

    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    API_ERROR = "api_error"


@dataclass(frozen=True, slots=True)
class RepoReference:
    """A normalized, provider-tagged repository identity."""

    owner: str
    repo: str
    provider: Provider
    normalized_url: str
    original_input: str
    branch: str | None = None
    commit: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True, slots=True)
class RepoMetadata(RepoReference):
    """A :class:`RepoReference` enriched with the repository visibility."""

    is_private: bool = False


@dataclass(frozen=True, slots=True)
class RepoVisibility:
    """The subset of ``GET /repos/{owner}/{repo}`` this system reads."""

    is_private: bool = False
    description: str | None = None
    default_branch: str | None = None
    visibility: str | None = None
    fork: bool | None = None
    html_url: str | None = None


@dataclass(frozen=True, slots=True)
class MetadataWarning:
    """A recovered metadata-fetch failure, reported next to the result."""

    kind: WarningKind
    message: str
    status: int | None = None
    rate_limit_remaining: str | None = None
    rate_limit_reset: datetime | None = None


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """The final output returned to the caller."""

    metadata: RepoMetadata
    warnings: tuple[MetadataWarning, ...] = field(default_factory=tuple)

    @property
    def normalized_url(self) -> str:
        return self.metadata.normalized_url

    @property
    def original_url(self) -> str:
        return self.metadata.original_input

    @property
    def metadata_available(self) -> bool:
        return not self.warnings
