"""Client configuration for the provider adapters.

Defaults work out of the box. A YAML file can override them, and a
couple of environment variables override the file, which is handy in
CI jobs where editing a config file is awkward.

Example build-stats.yaml:

    appveyor_base_url: https://ci.appveyor.com/api
    travis_base_url: https://api.travis-ci.org
    timeout: 15
    over_fetch_factor: 5
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from build_stats import __version__

ENV_TIMEOUT = "BUILD_STATS_TIMEOUT"
ENV_USER_AGENT = "BUILD_STATS_USER_AGENT"


class ClientConfig(BaseModel):
    """Settings shared by every provider adapter.

    Attributes:
        appveyor_base_url: Root of the AppVeyor REST API
        travis_base_url: Root of the TravisCI REST API
        timeout: HTTP timeout in seconds
        over_fetch_factor: Multiplier applied to the requested build count
            so pull-request filtering still leaves enough builds
        user_agent: User-Agent header sent with every request
    """

    appveyor_base_url: str = "https://ci.appveyor.com/api"
    travis_base_url: str = "https://api.travis-ci.org"
    timeout: float = Field(30.0, gt=0)
    over_fetch_factor: int = Field(5, ge=1)
    user_agent: str = f"build-stats/{__version__}"


def load_client_config(path: str | Path | None = None) -> ClientConfig:
    """Load a ClientConfig from an optional YAML file plus environment overrides.

    Args:
        path: Path to a YAML file. None, or a path that does not exist,
              means "use defaults".

    Returns:
        A validated ClientConfig

    Raises:
        ValueError: If the YAML is malformed or a value fails validation
    """
    raw: dict = {}
    if path is not None:
        config_path = Path(path)
        if config_path.exists():
            try:
                raw = yaml.safe_load(config_path.read_text()) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
            if not isinstance(raw, dict):
                raise ValueError(f"Invalid client config in {path}: expected a mapping")

    if timeout := os.environ.get(ENV_TIMEOUT):
        raw["timeout"] = timeout
    if user_agent := os.environ.get(ENV_USER_AGENT):
        raw["user_agent"] = user_agent

    try:
        return ClientConfig.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid client config: {exc}") from exc
