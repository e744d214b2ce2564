"""CircleCI adapter placeholder.

CircleCI build history is not supported yet. The class exists so that
provider selection stays uniform: callers get a clear error instead of
a missing provider.
"""

from __future__ import annotations

from build_stats.config import ClientConfig
from build_stats.exceptions import ProviderNotSupportedError
from build_stats.providers.base import Provider
from build_stats.schemas import Build
from build_stats.transport import HttpGet


class CircleCIClient:
    provider = Provider.CIRCLECI

    def __init__(
        self,
        config: ClientConfig | None = None,
        http_get: HttpGet | None = None,
    ) -> None:
        self.config = config or ClientConfig()

    async def get_builds(
        self,
        account: str,
        project: str,
        build_count: int,
        branch: str | None = None,
        include_pull_requests: bool = False,
    ) -> list[Build]:
        raise ProviderNotSupportedError(self.provider.value)
