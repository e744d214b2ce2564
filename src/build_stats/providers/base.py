"""Shared contract for CI provider adapters.

Every provider (AppVeyor, TravisCI, CircleCI) exposes the same async
get_builds() call, so callers can switch providers without touching
their own code.

Design notes:
- Uses Protocol for dependency inversion (swap real/mock easily)
- Adapters receive their HTTP collaborator through the constructor
- Filtering and truncation are shared so every provider agrees on them
"""

from __future__ import annotations

import functools
from collections.abc import Iterable
from enum import Enum
from typing import Protocol

from build_stats.config import ClientConfig
from build_stats.schemas import Build, pull_request_filter
from build_stats.transport import HttpGet, get_async

# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


class Provider(str, Enum):
    """CI services known to build_stats."""

    APPVEYOR = "appveyor"
    TRAVISCI = "travisci"
    CIRCLECI = "circleci"


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class CIProviderProtocol(Protocol):
    """Protocol for build history fetchers.

    Any CI integration should implement this interface.
    """

    provider: Provider

    async def get_builds(
        self,
        account: str,
        project: str,
        build_count: int,
        branch: str | None = None,
        include_pull_requests: bool = False,
    ) -> list[Build]:
        """Fetch the most recent builds of a project.

        Args:
            account: Account or organisation that owns the project
            project: Project (repository) name
            build_count: Maximum number of builds to return
            branch: Only return builds of this branch, where supported
            include_pull_requests: Keep builds triggered by pull requests

        Returns:
            Up to build_count builds in provider order (newest first)
        """
        ...


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def select_builds(
    builds: Iterable[Build],
    build_count: int,
    include_pull_requests: bool,
) -> list[Build]:
    """Apply the pull-request filter, then keep the first build_count builds.

    A zero or negative build_count yields an empty list.
    """
    kept = [b for b in builds if pull_request_filter(include_pull_requests, b)]
    return kept[: max(build_count, 0)]


def default_http_get(config: ClientConfig) -> HttpGet:
    """Bind get_async to the timeout and User-Agent from config."""
    return functools.partial(
        get_async,
        timeout=config.timeout,
        headers={"User-Agent": config.user_agent},
    )


# ---------------------------------------------------------------------------
# Mock Implementation
# ---------------------------------------------------------------------------


class MockCIClient:
    """Mock CI provider for testing and local development.

    Returns predefined builds without hitting any external API, but
    applies the same pull-request filter and truncation as the real
    adapters. The branch argument is accepted and ignored: the builds
    served are whatever the caller predefined.
    """

    def __init__(
        self,
        builds: list[Build] | None = None,
        provider: Provider = Provider.APPVEYOR,
    ) -> None:
        """Initialize with optional predefined builds.

        Args:
            builds: Builds to serve. If None, serves no builds.
            provider: Provider this mock stands in for
        """
        self._builds = builds or []
        self.provider = provider

    async def get_builds(
        self,
        account: str,
        project: str,
        build_count: int,
        branch: str | None = None,
        include_pull_requests: bool = False,
    ) -> list[Build]:
        """Return the predefined builds after filtering and truncation."""
        return select_builds(self._builds, build_count, include_pull_requests)
