"""URL normalizer — turn a loose repository reference into a RepoReference.

Accepts full URLs (any scheme, any host), ``owner/repo`` shorthand, and URLs
carrying ``/tree/<branch>`` or ``/commit/<sha>`` suffixes.  Pure and
synchronous: no I/O, identical input always yields an identical result.

Hosts that match none of the known providers are still parsed and tagged
with the primary provider.  This leniency is intentional.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from repo_resolver.domain.entities import PRIMARY_PROVIDER, Provider, RepoReference
from repo_resolver.domain.exceptions import InvalidFormatError, MissingOwnerOrRepoError

PRIMARY_BASE_URL = "https://github.com"

# ── Compiled patterns ───────────────────────────────────────────────────────

# Ordered: the first provider whose pattern appears in the hostname wins.
_PROVIDER_PATTERNS: list[tuple[Provider, re.Pattern[str]]] = [
    (Provider.GITHUB, re.compile(r"github\.com")),
    (Provider.GITLAB, re.compile(r"gitlab\.com")),
    (Provider.BITBUCKET, re.compile(r"bitbucket\.org")),
]

_SHORTHAND_RE = re.compile(r"^[\w.-]+/[\w.-]+$", re.ASCII)
_BRANCH_RE = re.compile(r"/tree/([\w.-]+)", re.ASCII)
_COMMIT_RE = re.compile(r"/commit/([a-f0-9]+)", re.IGNORECASE)

_SCHEME_SEPARATOR = "://"
_DOT_SEGMENTS = frozenset({".", ".."})


def normalize(value: str) -> RepoReference:
    """Parse *value* into a :class:`RepoReference`.

    Raises :class:`InvalidFormatError` when *value* is neither a URL nor a
    shorthand, and :class:`MissingOwnerOrRepoError` when the URL lacks an
    owner or repository segment.
    """
    url = value.strip()
    _check_format(url)

    if _SCHEME_SEPARATOR not in url:
        url = f"{PRIMARY_BASE_URL}/{url}"

    parts = urlsplit(url)
    hostname = parts.hostname or ""
    segments = [segment for segment in parts.path.split("/") if segment]

    # Branch and commit come from the whole string, not from the split path,
    # so the first occurrence always wins.
    branch_match = _BRANCH_RE.search(url)
    commit_match = _COMMIT_RE.search(url)

    owner = segments[0] if segments else ""
    repo = _strip_git_suffix(segments[1]) if len(segments) > 1 else ""
    if not owner or not repo or owner in _DOT_SEGMENTS or repo in _DOT_SEGMENTS:
        raise MissingOwnerOrRepoError(
            "Invalid repository URL: missing owner or repository name"
        )

    return RepoReference(
        owner=owner,
        repo=repo,
        provider=detect_provider(hostname),
        normalized_url=f"https://{hostname}/{owner}/{repo}",
        original_input=value,
        branch=branch_match.group(1) if branch_match else None,
        commit=commit_match.group(1).lower() if commit_match else None,
    )


def detect_provider(hostname: str) -> Provider:
    """Return the provider for *hostname*, defaulting to the primary one."""
    provider = _match_provider(hostname)
    return provider if provider is not None else PRIMARY_PROVIDER


def validate(value: str) -> bool:
    """Return ``True`` when *value* normalizes without error."""
    try:
        normalize(value)
    except (InvalidFormatError, MissingOwnerOrRepoError):
        return False
    return True


def is_known_provider(value: str) -> bool:
    """Return ``True`` when *value* is an absolute URL on a known provider host."""
    try:
        hostname = urlsplit(value.strip()).hostname
    except ValueError:
        return False
    return hostname is not None and _match_provider(hostname) is not None


# ── Internal helpers ────────────────────────────────────────────────────────


def _strip_git_suffix(name: str) -> str:
    while name.endswith(".git"):
        name = name.removesuffix(".git")
    return name


def _match_provider(hostname: str) -> Provider | None:
    for provider, pattern in _PROVIDER_PATTERNS:
        if pattern.search(hostname):
            return provider
    return None


def _check_format(url: str) -> None:
    if _SCHEME_SEPARATOR in url:
        try:
            parts = urlsplit(url)
            hostname = parts.hostname
        except ValueError as exc:
            raise InvalidFormatError(
                f"Invalid Git repository URL format: '{url}'"
            ) from exc
        if parts.scheme and hostname:
            return
    elif _SHORTHAND_RE.match(url):
        return

    raise InvalidFormatError(
        f"Invalid Git repository URL format: '{url}'. "
        "Expected a URL such as https://github.com/<owner>/<repo> "
        "or the shorthand <owner>/<repo>"
    )
