"""Resolve-repository use case — the main orchestration pipeline.

normalize → resolve auth → fetch metadata → merge.

Input and authentication errors abort the resolution.  Metadata errors do
not: the parse is still useful, so visibility falls back to public and the
failure is reported as a warning next to the result.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import assert_never

from repo_resolver.domain.entities import (
    PRIMARY_PROVIDER,
    MetadataWarning,
    RepoMetadata,
    RepoReference,
    ResolutionResult,
    WarningKind,
)
from repo_resolver.domain.exceptions import (
    AppInstallationRequiredError,
    ProviderApiError,
    RateLimitExceededError,
    RepositoryNotFoundError,
)
from repo_resolver.domain.ports.metadata_fetcher import MetadataFetcher
from repo_resolver.domain.value_objects import (
    AppAuthPending,
    AppInstallationToken,
    AuthConfig,
    AuthOutcome,
    Bearer,
    NoAuth,
)
from repo_resolver.services.auth_strategy import AuthStrategyResolver
from repo_resolver.services.url_normalizer import normalize

logger = logging.getLogger(__name__)


class ResolveRepoUseCase:
    """Orchestrates the full input → RepoMetadata pipeline.

    Parameters
    ----------
    auth_resolver:
        Picks the authentication strategy for the metadata call.
    metadata_fetcher:
        Adapter that reads repository details from GitHub.
    """

    def __init__(
        self,
        auth_resolver: AuthStrategyResolver,
        metadata_fetcher: MetadataFetcher,
    ) -> None:
        self._auth = auth_resolver
        self._fetcher = metadata_fetcher

    # ── Public entry point ──────────────────────────────────────────────

    async def execute(
        self, value: str, config: AuthConfig | None = None
    ) -> ResolutionResult:
        """Resolve *value* and return the merged result."""
        ref = normalize(value)
        logger.info("Resolving %s (%s)", ref.full_name, ref.provider.value)

        if ref.provider is not PRIMARY_PROVIDER:
            return ResolutionResult(metadata=_merge(ref, is_private=False))

        auth = await self._auth.resolve(config or AuthConfig())
        _require_usable(auth)

        try:
            visibility = await self._fetcher.fetch_metadata(ref, auth)
        except RateLimitExceededError as exc:
            logger.warning(
                "%s (remaining=%s) while resolving %s", exc, exc.remaining, ref.full_name
            )
            warning = MetadataWarning(
                kind=WarningKind.RATE_LIMITED,
                message=str(exc),
                status=403,
                rate_limit_remaining=exc.remaining,
                rate_limit_reset=exc.reset_at,
            )
        except RepositoryNotFoundError as exc:
            logger.error("Failed to fetch repository metadata: %s", exc)
            warning = MetadataWarning(
                kind=WarningKind.NOT_FOUND, message=str(exc), status=404
            )
        except ProviderApiError as exc:
            logger.error("Failed to fetch repository metadata: %s", exc)
            warning = MetadataWarning(
                kind=WarningKind.API_ERROR, message=str(exc), status=exc.status
            )
        else:
            return ResolutionResult(
                metadata=_merge(ref, is_private=visibility.is_private)
            )

        return ResolutionResult(
            metadata=_merge(ref, is_private=False), warnings=(warning,)
        )


def _require_usable(auth: AuthOutcome) -> None:
    if isinstance(auth, AppAuthPending):
        raise AppInstallationRequiredError(auth.installation_url)
    if isinstance(auth, (NoAuth, Bearer, AppInstallationToken)):
        return
    assert_never(auth)


def _merge(ref: RepoReference, *, is_private: bool) -> RepoMetadata:
    fields = {f.name: getattr(ref, f.name) for f in dataclasses.fields(ref)}
    return RepoMetadata(**fields, is_private=is_private)
