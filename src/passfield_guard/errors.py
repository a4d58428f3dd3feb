"""Error kinds raised inside the trust engine.

Load errors only escape from ``ConfigLoader.load()``. Everything caller-facing
converts them to a fail-closed answer.
"""

from __future__ import annotations


class TrustError(Exception):
    """Base class for all passfield_guard errors."""


class FetchError(TrustError):
    """A payload could not be fetched or decoded."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ConfigFetchError(FetchError):
    """The bootstrap configuration was unreachable or unparseable."""


class ListFetchError(FetchError):
    """The trust list could not be fetched (initial load or refresh)."""


class InvalidResponseError(TrustError):
    """A query answer was absent or did not carry the expected fields."""
