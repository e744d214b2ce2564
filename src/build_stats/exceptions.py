"""Exception hierarchy for build_stats.

Every failure raised by this package derives from BuildStatsError so
callers can catch the whole family at once. The more specific classes
also derive from the matching builtin (ValueError, NotImplementedError)
where that is what a caller would naturally expect.
"""

from __future__ import annotations


class BuildStatsError(Exception):
    """Base class for all build_stats errors."""


class TransportError(BuildStatsError):
    """An HTTP request failed or returned a non-success status.

    Attributes:
        url: The URL that was requested
        status_code: HTTP status code, or None for network-level failures
    """

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ParseError(BuildStatsError, ValueError):
    """A response body was not valid JSON or did not match the provider schema."""


class EmptyInputError(BuildStatsError, ValueError):
    """A metric was requested over an empty list of builds."""


class ProviderNotSupportedError(BuildStatsError, NotImplementedError):
    """The selected CI provider has no implementation yet."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"CI provider '{provider}' is not supported yet")
