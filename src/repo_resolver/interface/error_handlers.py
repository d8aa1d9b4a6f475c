"""Global exception handlers — translate domain errors to HTTP responses.

Each domain exception maps to a specific HTTP status code and the
standard ``{"status": "error", "code": "...", "message": "..."}`` envelope.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from repo_resolver.domain.exceptions import (
    AppAuthFailedError,
    AppInstallationRequiredError,
    InvalidFormatError,
    InvalidTokenFormatError,
    MissingOwnerOrRepoError,
    ProviderApiError,
    RateLimitExceededError,
    RepoResolverError,
    RepositoryNotFoundError,
)
from repo_resolver.interface.schemas import ErrorResponse

logger = logging.getLogger(__name__)

_EXCEPTION_STATUS: list[tuple[type[RepoResolverError], int]] = [
    (InvalidFormatError, 400),
    (MissingOwnerOrRepoError, 400),
    (InvalidTokenFormatError, 401),
    (AppInstallationRequiredError, 401),
    (AppAuthFailedError, 502),
    (RepositoryNotFoundError, 404),
    (RateLimitExceededError, 429),
    (ProviderApiError, 502),
]


def _error_json(
    status_code: int, code: str, message: str, installation_url: str | None = None
) -> JSONResponse:
    body = ErrorResponse(code=code, message=message, installation_url=installation_url)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    for exc_type, code in _EXCEPTION_STATUS:

        def _make_handler(
            status_code: int,
        ):  # type: ignore[no-untyped-def]
            async def handler(request: Request, exc: Exception) -> JSONResponse:
                logger.warning("%s: %s", type(exc).__name__, exc)
                error_code = getattr(exc, "code", RepoResolverError.code)
                return _error_json(
                    status_code,
                    error_code,
                    str(exc),
                    installation_url=getattr(exc, "installation_url", None),
                )

            return handler

        app.add_exception_handler(exc_type, _make_handler(code))

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = []
        for err in exc.errors():
            loc = " → ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        return _error_json(422, "INVALID_REQUEST", "; ".join(messages))

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return _error_json(
            500, "INTERNAL_ERROR", "An unexpected error occurred. Please try again later."
        )
