"""Tests for the resolve-repository use case."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx
import pytest

from repo_resolver.domain.entities import Provider, WarningKind
from repo_resolver.domain.exceptions import (
    AppAuthFailedError,
    AppInstallationRequiredError,
    InvalidFormatError,
    InvalidTokenFormatError,
    MissingOwnerOrRepoError,
)
from repo_resolver.domain.value_objects import AuthConfig, GitHubAppConfig
from repo_resolver.infrastructure.github_app_adapter import GitHubAppAdapter
from repo_resolver.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_resolver.services.auth_strategy import AuthStrategyResolver
from repo_resolver.services.resolve_repo import ResolveRepoUseCase

INSTALL_URL = "https://github.com/apps/repo-resolver/installations/new"


def _use_case(client: httpx.AsyncClient) -> ResolveRepoUseCase:
    return ResolveRepoUseCase(
        auth_resolver=AuthStrategyResolver(GitHubAppAdapter(client=client), INSTALL_URL),
        metadata_fetcher=GitHubRestAdapter(client=client),
    )


class Recorder:
    """MockTransport handler that answers repository lookups with a fixed response."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.startswith("/app/installations/"):
            return httpx.Response(201, json={"token": "ghs_installation"})
        return self.response


class TestResolveRepoUseCase:
    @pytest.mark.asyncio
    async def test_public_repository(self, make_client) -> None:
        recorder = Recorder(httpx.Response(200, json={"private": False}))

        async with make_client(recorder) as client:
            result = await _use_case(client).execute("https://github.com/user/repo.git")

        meta = result.metadata
        assert (meta.owner, meta.repo, meta.provider) == ("user", "repo", Provider.GITHUB)
        assert meta.is_private is False
        assert meta.branch is None and meta.commit is None
        assert result.normalized_url == "https://github.com/user/repo"
        assert result.original_url == "https://github.com/user/repo.git"
        assert result.warnings == ()
        assert result.metadata_available is True
        assert "Authorization" not in recorder.requests[0].headers

    @pytest.mark.asyncio
    async def test_private_repository_with_token(self, make_client) -> None:
        recorder = Recorder(httpx.Response(200, json={"private": True}))

        async with make_client(recorder) as client:
            result = await _use_case(client).execute(
                "user/repo", AuthConfig(token="ghp_secret")
            )

        assert result.metadata.is_private is True
        assert recorder.requests[0].headers["Authorization"] == "Bearer ghp_secret"

    @pytest.mark.asyncio
    async def test_branch_survives_merge(self, make_client) -> None:
        recorder = Recorder(httpx.Response(200, json={"private": True}))

        async with make_client(recorder) as client:
            result = await _use_case(client).execute(
                "https://github.com/user/repo/tree/main"
            )

        assert result.metadata.branch == "main"
        assert result.metadata.is_private is True

    @pytest.mark.asyncio
    async def test_not_found_degrades_to_warning(self, make_client, caplog) -> None:
        recorder = Recorder(httpx.Response(404, text="Not Found"))

        with caplog.at_level(logging.ERROR):
            async with make_client(recorder) as client:
                result = await _use_case(client).execute("https://github.com/user/nonexistent")

        assert result.metadata.is_private is False
        assert result.metadata.repo == "nonexistent"
        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert warning.kind is WarningKind.NOT_FOUND
        assert warning.status == 404
        assert "Repository not found" in warning.message
        assert result.metadata_available is False
        assert "Failed to fetch repository metadata" in caplog.text

    @pytest.mark.asyncio
    async def test_rate_limit_degrades_to_warning(self, make_client, caplog) -> None:
        recorder = Recorder(
            httpx.Response(
                403,
                text="API rate limit exceeded",
                headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1700000000"},
            )
        )

        with caplog.at_level(logging.WARNING):
            async with make_client(recorder) as client:
                result = await _use_case(client).execute("https://github.com/user/repo")

        assert result.metadata.is_private is False
        warning = result.warnings[0]
        assert warning.kind is WarningKind.RATE_LIMITED
        assert warning.rate_limit_remaining == "0"
        assert warning.rate_limit_reset == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        rate_records = [r for r in caplog.records if "rate limit" in r.getMessage()]
        assert rate_records and rate_records[0].levelno == logging.WARNING

    @pytest.mark.asyncio
    async def test_server_error_degrades_to_warning(self, make_client) -> None:
        recorder = Recorder(httpx.Response(502, text="bad gateway"))

        async with make_client(recorder) as client:
            result = await _use_case(client).execute("https://github.com/user/repo")

        assert result.metadata.is_private is False
        assert result.warnings[0].kind is WarningKind.API_ERROR
        assert result.warnings[0].status == 502

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("url", "provider"),
        [
            ("https://gitlab.com/user/repo", Provider.GITLAB),
            ("https://bitbucket.org/user/repo", Provider.BITBUCKET),
        ],
    )
    async def test_other_providers_are_not_queried(
        self, make_client, url: str, provider: Provider
    ) -> None:
        recorder = Recorder(httpx.Response(500))

        async with make_client(recorder) as client:
            # Even a malformed token is ignored: auth is skipped entirely.
            result = await _use_case(client).execute(url, AuthConfig(token="bogus"))

        assert result.metadata.provider is provider
        assert result.metadata.is_private is False
        assert result.warnings == ()
        assert recorder.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("value", "error"),
        [
            ("invalid-url", InvalidFormatError),
            ("https://example.com/user", MissingOwnerOrRepoError),
            ("../..", MissingOwnerOrRepoError),
        ],
    )
    async def test_input_errors_abort(self, make_client, value: str, error: type) -> None:
        recorder = Recorder(httpx.Response(200, json={"private": False}))

        async with make_client(recorder) as client:
            with pytest.raises(error):
                await _use_case(client).execute(value)

        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_invalid_token_aborts_before_network(self, make_client) -> None:
        recorder = Recorder(httpx.Response(200, json={"private": False}))

        async with make_client(recorder) as client:
            with pytest.raises(InvalidTokenFormatError):
                await _use_case(client).execute(
                    "https://github.com/user/repo", AuthConfig(token="invalid_token")
                )

        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_app_installation_required(
        self, make_client, uninstalled_app_config: GitHubAppConfig
    ) -> None:
        recorder = Recorder(httpx.Response(200, json={"private": True}))

        async with make_client(recorder) as client:
            with pytest.raises(AppInstallationRequiredError) as error:
                await _use_case(client).execute(
                    "https://github.com/user/repo",
                    AuthConfig(github_app=uninstalled_app_config),
                )

        assert error.value.installation_url == INSTALL_URL
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_app_installation_token_is_used(
        self, make_client, app_config: GitHubAppConfig
    ) -> None:
        recorder = Recorder(httpx.Response(200, json={"private": True}))

        async with make_client(recorder) as client:
            result = await _use_case(client).execute(
                "https://github.com/user/repo",
                AuthConfig(github_app=app_config, token="ghp_ignored"),
            )

        assert result.metadata.is_private is True
        paths = [r.url.path for r in recorder.requests]
        assert paths == ["/app/installations/42/access_tokens", "/repos/user/repo"]
        assert recorder.requests[1].headers["Authorization"] == "Bearer ghs_installation"

    @pytest.mark.asyncio
    async def test_app_auth_failure_aborts(
        self, make_client, app_config: GitHubAppConfig
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.startswith("/app/"):
                return httpx.Response(404, json={"message": "Not Found"})
            raise AssertionError("metadata must not be fetched")

        async with make_client(handler) as client:
            with pytest.raises(AppAuthFailedError):
                await _use_case(client).execute(
                    "https://github.com/user/repo", AuthConfig(github_app=app_config)
                )
