"""Aggregate duration metrics over a list of builds.

All functions here are pure single-pass reductions. None of them accept
an empty list: a metric over zero builds has no meaningful value, so
EmptyInputError is raised instead of guessing a default.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import timedelta

from build_stats.exceptions import EmptyInputError
from build_stats.schemas import Build, BuildSummary


def _require_builds(builds: Sequence[Build], metric: str) -> None:
    if not builds:
        raise EmptyInputError(f"Cannot compute {metric} of an empty build list")


def longest_build_time(builds: Sequence[Build]) -> timedelta:
    """Duration of the slowest build (first one wins on ties)."""
    _require_builds(builds, "longest build time")
    return max(builds, key=lambda b: b.time_taken).time_taken


def shortest_build_time(builds: Sequence[Build]) -> timedelta:
    """Duration of the fastest build (first one wins on ties)."""
    _require_builds(builds, "shortest build time")
    return min(builds, key=lambda b: b.time_taken).time_taken


def average_build_time(builds: Sequence[Build]) -> timedelta:
    """Arithmetic mean of all build durations."""
    _require_builds(builds, "average build time")
    total = sum((b.time_taken for b in builds), timedelta(0))
    return total / len(builds)


def summarize(builds: Sequence[Build]) -> BuildSummary:
    """Compute every metric in one go.

    Args:
        builds: Non-empty list of builds

    Returns:
        A BuildSummary with longest/shortest/average durations and a
        count of builds per status

    Raises:
        EmptyInputError: If builds is empty
    """
    _require_builds(builds, "build summary")
    return BuildSummary(
        count=len(builds),
        longest=longest_build_time(builds),
        shortest=shortest_build_time(builds),
        average=average_build_time(builds),
        status_counts=dict(Counter(b.status for b in builds)),
    )
