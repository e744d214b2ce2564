"""TravisCI build history adapter.

The builds endpoint returns a JSON array, one page at a time. Older
pages are reached with the after_number cursor:

    GET https://api.travis-ci.org/repos/{account}/{project}/builds?after_number=120

Status is not a single field on Travis: it combines "state" (the
lifecycle stage) with "result" (the exit code once finished).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from build_stats.config import ClientConfig
from build_stats.exceptions import ParseError
from build_stats.logging_config import get_logger
from build_stats.providers.base import (
    Provider,
    default_http_get,
    select_builds,
)
from build_stats.schemas import Build, BuildStatus, ensure_utc, get_time_taken
from build_stats.transport import ContentFormat, HttpGet, deserialize_json

logger = get_logger(__name__)


def parse_status(state: str | None, result: int | None) -> BuildStatus:
    """Derive a BuildStatus from Travis' state and result fields.

    A finished build with a null result counts as failed.
    """
    if state == "finished":
        return BuildStatus.SUCCESS if result == 0 else BuildStatus.FAILED
    if state == "started":
        return BuildStatus.PENDING
    return BuildStatus.UNKNOWN


def is_pull_request(event_type: str | None) -> bool:
    return event_type == "pull_request"


class TravisBuildRecord(BaseModel):
    """One element of the builds array, as TravisCI sends it."""

    model_config = ConfigDict(extra="ignore")

    id: int
    number: int
    branch: str | None = None
    event_type: str | None = None
    state: str | None = None
    result: int | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @field_validator("started_at", "finished_at")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    def to_build(self) -> Build:
        return Build(
            id=self.id,
            build_number=self.number,
            branch=self.branch or "",
            from_pull_request=is_pull_request(self.event_type),
            time_taken=get_time_taken(self.started_at, self.finished_at),
            status=parse_status(self.state, self.result),
        )


def convert_to_builds(items: Any) -> list[Build]:
    """Map a raw TravisCI builds array onto Build."""
    if not isinstance(items, list):
        raise ParseError("TravisCI builds response is not a JSON array")
    try:
        return [TravisBuildRecord.model_validate(item).to_build() for item in items]
    except ValidationError as exc:
        raise ParseError(f"Unexpected TravisCI build record: {exc}") from exc


class TravisCIClient:
    """Fetches build history from TravisCI.

    Usage:
        client = TravisCIClient()
        builds = await client.get_builds("myorg", "api", 10)
        older = await client.get_batch_of_builds("myorg", "api", after_number=120)
    """

    provider = Provider.TRAVISCI

    def __init__(
        self,
        config: ClientConfig | None = None,
        http_get: HttpGet | None = None,
    ) -> None:
        """Initialize the TravisCI client.

        Args:
            config: Client settings. Uses defaults if not provided.
            http_get: HTTP collaborator. Defaults to transport.get_async.
        """
        self.config = config or ClientConfig()
        self._http_get = http_get or default_http_get(self.config)

    def builds_url(
        self,
        account: str,
        project: str,
        after_number: int | None = None,
    ) -> str:
        url = f"{self.config.travis_base_url}/repos/{account}/{project}/builds"
        if after_number is not None:
            url += f"?after_number={after_number}"
        return url

    async def get_batch_of_builds(
        self,
        account: str,
        project: str,
        after_number: int | None = None,
    ) -> list[Build]:
        """Fetch a single page of builds, unfiltered.

        Args:
            account: Account or organisation that owns the repository
            project: Repository name
            after_number: Only return builds older than this build number

        Returns:
            The page's builds in provider order, or [] for an empty response

        Raises:
            TransportError: If the HTTP request fails
            ParseError: If the response is not a valid builds array
        """
        url = self.builds_url(account, project, after_number)
        body = await self._http_get(url, ContentFormat.JSON)
        if not body:
            return []
        return convert_to_builds(deserialize_json(body))

    async def get_builds(
        self,
        account: str,
        project: str,
        build_count: int,
        branch: str | None = None,
        include_pull_requests: bool = False,
    ) -> list[Build]:
        """Fetch the most recent TravisCI builds of a project.

        Only the first page is requested, and the builds endpoint takes
        no record count, so fewer than build_count builds may come back.

        Raises:
            TransportError: If the HTTP request fails
            ParseError: If the response is not a valid builds array
        """
        log = logger.bind(provider=self.provider.value, account=account, project=project)
        if branch is not None:
            # TODO: pass branch through once the v3 API (branch.name filter) is adopted
            log.debug("branch_filter_ignored", branch=branch)

        log.info("fetching_builds", build_count=build_count)
        try:
            page = await self.get_batch_of_builds(account, project)
        except Exception as e:
            log.error("fetch_failed", error=str(e), exc_info=True)
            raise

        builds = select_builds(page, build_count, include_pull_requests)
        log.info("builds_fetched", fetched=len(page), count=len(builds))
        return builds
