"""AppVeyor build history adapter.

Uses the project history endpoint, which returns a JSON object with the
builds under a "builds" key:

    GET https://ci.appveyor.com/api/projects/{account}/{project}/history
        ?recordsNumber=50&branch=master

API docs: https://www.appveyor.com/docs/api/projects-builds/
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

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

# AppVeyor sends .NET timestamps with 7 fractional digits
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")

_STATUS_MAP: dict[str, BuildStatus] = {
    "success": BuildStatus.SUCCESS,
    "failed": BuildStatus.FAILED,
    "cancelled": BuildStatus.CANCELLED,
    "queued": BuildStatus.PENDING,
    "running": BuildStatus.PENDING,
}


def parse_status(status: str | None) -> BuildStatus:
    """Map an AppVeyor status string onto BuildStatus."""
    return _STATUS_MAP.get(status or "", BuildStatus.UNKNOWN)


class AppVeyorBuildRecord(BaseModel):
    """One entry of the "builds" array, as AppVeyor sends it."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    build_id: int = Field(..., alias="buildId")
    build_number: int = Field(..., alias="buildNumber")
    status: str | None = None
    branch: str | None = None
    pull_request_id: Any = Field(None, alias="pullRequestId")
    started: datetime | None = None
    finished: datetime | None = None

    @field_validator("started", "finished", mode="before")
    @classmethod
    def _trim_fraction(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _LONG_FRACTION.sub(r"\1", value, count=1)
        return value

    @field_validator("started", "finished")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    def to_build(self) -> Build:
        return Build(
            id=self.build_id,
            build_number=self.build_number,
            status=parse_status(self.status),
            branch=self.branch or "",
            from_pull_request=self.pull_request_id is not None,
            time_taken=get_time_taken(self.started, self.finished),
        )


def extract_build_items(payload: Any) -> list[Any]:
    """Pull the raw build array out of a parsed history response."""
    if not isinstance(payload, dict):
        raise ParseError("AppVeyor history response is not a JSON object")
    items = payload.get("builds") or []
    if not isinstance(items, list):
        raise ParseError("AppVeyor 'builds' field is not an array")
    return items


def convert_to_builds(items: list[Any]) -> list[Build]:
    """Map raw AppVeyor build records onto Build."""
    try:
        return [AppVeyorBuildRecord.model_validate(item).to_build() for item in items]
    except ValidationError as exc:
        raise ParseError(f"Unexpected AppVeyor build record: {exc}") from exc


class AppVeyorClient:
    """Fetches build history from AppVeyor.

    Usage:
        client = AppVeyorClient()
        builds = await client.get_builds("myorg", "api", 10, branch="master")
    """

    provider = Provider.APPVEYOR

    def __init__(
        self,
        config: ClientConfig | None = None,
        http_get: HttpGet | None = None,
    ) -> None:
        """Initialize the AppVeyor client.

        Args:
            config: Client settings. Uses defaults if not provided.
            http_get: HTTP collaborator. Defaults to transport.get_async.
        """
        self.config = config or ClientConfig()
        self._http_get = http_get or default_http_get(self.config)

    def history_url(
        self,
        account: str,
        project: str,
        records_number: int,
        branch: str | None = None,
    ) -> str:
        params: dict[str, Any] = {"recordsNumber": records_number}
        if branch is not None:
            params["branch"] = branch
        return (
            f"{self.config.appveyor_base_url}/projects/{account}/{project}/history"
            f"?{httpx.QueryParams(params)}"
        )

    async def get_builds(
        self,
        account: str,
        project: str,
        build_count: int,
        branch: str | None = None,
        include_pull_requests: bool = False,
    ) -> list[Build]:
        """Fetch the most recent AppVeyor builds of a project.

        Over-fetches (over_fetch_factor x build_count records) so that
        excluding pull-request builds usually still leaves enough.

        Raises:
            TransportError: If the HTTP request fails
            ParseError: If the response is not a valid history document
        """
        records_number = self.config.over_fetch_factor * max(build_count, 0)
        url = self.history_url(account, project, records_number, branch)

        log = logger.bind(provider=self.provider.value, account=account, project=project)
        log.info("fetching_builds", url=url, build_count=build_count, branch=branch)
        try:
            body = await self._http_get(url, ContentFormat.JSON)
            if not body:
                log.info("builds_fetched", count=0, empty_response=True)
                return []

            items = extract_build_items(deserialize_json(body))
            builds = select_builds(
                convert_to_builds(items), build_count, include_pull_requests
            )
        except Exception as e:
            log.error("fetch_failed", url=url, error=str(e), exc_info=True)
            raise

        log.info("builds_fetched", fetched=len(items), count=len(builds))
        return builds
