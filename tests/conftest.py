"""Pytest configuration and fixtures for repo-resolver tests."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from repo_resolver.domain.value_objects import GitHubAppConfig

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(scope="session")
def rsa_private_key_pem() -> str:
    """A throwaway RSA key good enough to sign App JWTs."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture
def app_config(rsa_private_key_pem: str) -> GitHubAppConfig:
    """App credentials bound to installation 42."""
    return GitHubAppConfig(
        app_id="12345",
        private_key=rsa_private_key_pem,
        client_id="Iv1.client",
        client_secret="shh",
        installation_id="42",
    )


@pytest.fixture
def uninstalled_app_config(rsa_private_key_pem: str) -> GitHubAppConfig:
    """App credentials without an installation."""
    return GitHubAppConfig(
        app_id="12345",
        private_key=rsa_private_key_pem,
        client_id="Iv1.client",
        client_secret="shh",
    )


@pytest.fixture
def make_client() -> Callable[[Handler], httpx.AsyncClient]:
    """Factory for AsyncClients whose requests are answered by a handler."""

    def _make(handler: Handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
