"""Tests for the build-stats command-line entry point.

The provider is replaced with MockCIClient so no network calls happen.

Run with: pytest tests/test_cli.py -v
"""

from __future__ import annotations

import json
from datetime import timedelta
from unittest.mock import patch

import pytest

from build_stats.cli import main
from build_stats.providers import MockCIClient
from build_stats.schemas import Build, BuildStatus


@pytest.fixture
def builds() -> list[Build]:
    return [
        Build(id=3, build_number=3, time_taken=timedelta(minutes=4), branch="master"),
        Build(
            id=2,
            build_number=2,
            time_taken=timedelta(minutes=1),
            branch="master",
            from_pull_request=True,
        ),
        Build(
            id=1,
            build_number=1,
            time_taken=timedelta(minutes=2),
            status=BuildStatus.SUCCESS,
            branch="master",
        ),
    ]


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep structlog on its defaults so captured streams are not cached."""
    with patch("build_stats.cli.setup_logging"):
        yield


def run_cli(argv: list[str], builds: list[Build]) -> int:
    with patch("build_stats.cli.get_client", return_value=MockCIClient(builds)):
        return main(argv)


class TestCLI:
    def test_prints_builds_as_json(self, builds: list[Build], capsys) -> None:
        code = run_cli(["appveyor", "myorg", "api", "--count", "5"], builds)

        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert [b["id"] for b in out] == [3, 1]

    def test_include_pull_requests(self, builds: list[Build], capsys) -> None:
        code = run_cli(
            ["travisci", "myorg", "api", "--include-pull-requests"], builds
        )

        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert [b["id"] for b in out] == [3, 2, 1]

    def test_summary(self, builds: list[Build], capsys) -> None:
        code = run_cli(["appveyor", "myorg", "api", "--summary"], builds)

        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["count"] == 2

    def test_summary_of_no_builds_fails(self, capsys) -> None:
        code = run_cli(["appveyor", "myorg", "api", "--summary"], [])

        assert code == 1
        assert "error:" in capsys.readouterr().err

    def test_circleci_not_supported(self, capsys) -> None:
        code = main(["circleci", "myorg", "api"])

        assert code == 1
        assert "not supported" in capsys.readouterr().err

    def test_rejects_unknown_provider(self) -> None:
        with pytest.raises(SystemExit):
            main(["jenkins", "myorg", "api"])
