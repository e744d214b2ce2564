"""Command-line entry point.

Usage:
    build-stats appveyor myorg api --count 10 --branch master
    build-stats travisci myorg api --summary

Builds (or the summary) are printed to stdout as JSON, logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from build_stats.config import load_client_config
from build_stats.exceptions import BuildStatsError
from build_stats.logging_config import get_logger, setup_logging
from build_stats.metrics import summarize
from build_stats.providers import Provider, get_client

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="build-stats",
        description="Fetch CI build history and report build duration metrics",
    )
    parser.add_argument(
        "provider",
        choices=[p.value for p in Provider],
        help="CI provider to query",
    )
    parser.add_argument("account", help="Account or organisation name")
    parser.add_argument("project", help="Project or repository name")
    parser.add_argument(
        "--count", "-n",
        type=int,
        default=10,
        help="Number of builds to fetch (default: 10)",
    )
    parser.add_argument("--branch", "-b", help="Only fetch builds of this branch")
    parser.add_argument(
        "--include-pull-requests",
        action="store_true",
        help="Keep builds triggered by pull requests",
    )
    parser.add_argument("--config", "-c", help="Path to a YAML client config file")
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print longest/shortest/average build time instead of the builds",
    )
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(log_level=args.log_level)

    try:
        config = load_client_config(args.config)
        client = get_client(args.provider, config=config)
        builds = asyncio.run(
            client.get_builds(
                args.account,
                args.project,
                args.count,
                branch=args.branch,
                include_pull_requests=args.include_pull_requests,
            )
        )
        if args.summary:
            print(summarize(builds).model_dump_json(indent=2))
        else:
            print(json.dumps([b.model_dump(mode="json") for b in builds], indent=2))
    except (BuildStatsError, ValueError) as e:
        logger.error("command_failed", provider=args.provider, error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
