"""API routes — thin controllers that delegate to the use case."""

from __future__ import annotations

from typing import assert_never

from fastapi import APIRouter, Depends

from repo_resolver.domain.value_objects import (
    AppAuthPending,
    AppInstallationToken,
    AuthConfig,
    Bearer,
    GitHubAppConfig,
    NoAuth,
)
from repo_resolver.infrastructure.config import Settings
from repo_resolver.interface.dependencies import (
    get_app_settings,
    get_auth_resolver,
    get_use_case,
)
from repo_resolver.interface.schemas import (
    GitHubAppAuthRequest,
    GitHubAppAuthResponse,
    ResolveRequest,
    ResolveResponse,
)
from repo_resolver.services.auth_strategy import AuthStrategyResolver
from repo_resolver.services.resolve_repo import ResolveRepoUseCase

router = APIRouter()


@router.post(
    "/repo",
    response_model=ResolveResponse,
    responses={
        400: {"description": "Invalid repository URL"},
        401: {"description": "Invalid token or GitHub App installation required"},
        502: {"description": "GitHub App authentication failed"},
    },
)
async def resolve_repo(
    body: ResolveRequest,
    use_case: ResolveRepoUseCase = Depends(get_use_case),
    settings: Settings = Depends(get_app_settings),
) -> ResolveResponse:
    """Normalize a repository reference and attach its visibility."""
    token = body.auth_token
    if token is None and settings.github_token is not None:
        token = settings.github_token.get_secret_value()

    config = AuthConfig(github_app=settings.github_app(), token=token)
    result = await use_case.execute(body.url, config)
    return ResolveResponse.from_domain(result)


@router.post(
    "/auth/github-app",
    response_model=GitHubAppAuthResponse,
    response_model_exclude_none=True,
    responses={502: {"description": "GitHub App authentication failed"}},
)
async def github_app_auth(
    body: GitHubAppAuthRequest,
    resolver: AuthStrategyResolver = Depends(get_auth_resolver),
) -> GitHubAppAuthResponse:
    """Exchange GitHub App credentials for a token, or report the install URL."""
    app = GitHubAppConfig(
        app_id=body.app_id,
        private_key=body.private_key,
        client_id=body.client_id,
        client_secret=body.client_secret,
        installation_id=body.installation_id,
    )
    outcome = await resolver.resolve(AuthConfig(github_app=app))

    if isinstance(outcome, AppInstallationToken):
        return GitHubAppAuthResponse(
            type="installation", token=outcome.token, expires_at=outcome.expires_at
        )
    if isinstance(outcome, AppAuthPending):
        return GitHubAppAuthResponse(type="app", installation_url=outcome.installation_url)
    if isinstance(outcome, (NoAuth, Bearer)):
        raise AssertionError(f"App credentials resolved to {type(outcome).__name__}")
    assert_never(outcome)
