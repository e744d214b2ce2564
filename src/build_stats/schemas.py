"""Pydantic models shared by every CI provider adapter.

Each provider speaks its own JSON dialect. The adapters translate those
payloads into the provider-agnostic models defined here, so metrics and
any presentation layer only ever deal with one shape.

Key design decisions:
- Build is frozen: it is created once per provider record and never mutated
- Missing timestamps produce a zero duration rather than an error
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class BuildStatus(str, Enum):
    """Normalized outcome of a CI run.

    SUCCESS: Build finished and passed
    FAILED: Build finished with a failure
    CANCELLED: Build was cancelled before finishing
    PENDING: Build is queued or still running
    UNKNOWN: Provider reported a status we do not recognize
    """

    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"
    PENDING = "pending"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Build record
# ---------------------------------------------------------------------------


class Build(BaseModel):
    """A single CI run, normalized across providers.

    Attributes:
        id: Provider-assigned identifier (unique per provider and project)
        build_number: Human-facing sequential build number
        time_taken: Wall-clock duration, zero when start or finish is unknown
        status: Normalized build status
        branch: Source-control branch the build ran against
        from_pull_request: Whether a pull-request event triggered the build
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Provider-assigned build identifier")
    build_number: int = Field(..., description="Sequential build number")
    time_taken: timedelta = Field(
        default_factory=timedelta, description="Build duration"
    )
    status: BuildStatus = Field(BuildStatus.UNKNOWN, description="Normalized status")
    branch: str = Field("", description="Branch name")
    from_pull_request: bool = Field(
        False, description="Triggered by a pull request"
    )


class BuildSummary(BaseModel):
    """Aggregate duration metrics over a list of builds."""

    count: int = Field(..., gt=0, description="Number of builds summarized")
    longest: timedelta
    shortest: timedelta
    average: timedelta
    status_counts: dict[BuildStatus, int] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def ensure_utc(value: datetime | None) -> datetime | None:
    """Make a timestamp timezone-aware, reading naive values as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def get_time_taken(started: datetime | None, finished: datetime | None) -> timedelta:
    """Duration between two optional timestamps.

    Returns timedelta(0) unless both timestamps are present.
    """
    if started is None or finished is None:
        return timedelta(0)
    return finished - started


def pull_request_filter(include_pull_requests: bool, build: Build) -> bool:
    """Predicate keeping a build unless it is a pull-request build being excluded."""
    return include_pull_requests or not build.from_pull_request
