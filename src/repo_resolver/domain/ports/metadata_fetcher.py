"""Port: repository metadata fetcher — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_resolver.domain.entities import RepoReference, RepoVisibility
from repo_resolver.domain.value_objects import AuthOutcome


class MetadataFetcher(Protocol):
    """Abstract contract for reading repository details from the provider."""

    async def fetch_metadata(
        self, ref: RepoReference, auth: AuthOutcome
    ) -> RepoVisibility:
        """Return the visibility of *ref*, authenticated according to *auth*."""
        ...
