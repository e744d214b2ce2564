"""CI provider adapters.

Each adapter fetches a provider's build history and normalizes it into
build_stats.schemas.Build. Use get_client() to pick one by name.
"""

from __future__ import annotations

from build_stats.config import ClientConfig
from build_stats.providers.appveyor import AppVeyorClient
from build_stats.providers.base import CIProviderProtocol, MockCIClient, Provider
from build_stats.providers.circleci import CircleCIClient
from build_stats.providers.travisci import TravisCIClient
from build_stats.transport import HttpGet

_CLIENTS = {
    Provider.APPVEYOR: AppVeyorClient,
    Provider.TRAVISCI: TravisCIClient,
    Provider.CIRCLECI: CircleCIClient,
}


def get_client(
    provider: Provider | str,
    config: ClientConfig | None = None,
    http_get: HttpGet | None = None,
) -> CIProviderProtocol:
    """Instantiate the adapter for a provider.

    Args:
        provider: A Provider member or its string value (e.g. "travisci")
        config: Client settings shared by the adapter
        http_get: HTTP collaborator override

    Raises:
        ValueError: If the provider name is not recognized
    """
    return _CLIENTS[Provider(provider)](config=config, http_get=http_get)


__all__ = [
    "AppVeyorClient",
    "CIProviderProtocol",
    "CircleCIClient",
    "MockCIClient",
    "Provider",
    "TravisCIClient",
    "get_client",
]
