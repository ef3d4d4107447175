"""
Error taxonomy for the Government Records MCP.

    ConfigurationError      Unknown municipality, missing credential
    AdapterConnectionError  Portal session could not be established
    FetchError              Navigation/network failure during a scrape
    UpstreamModelError      LLM provider failure

Unknown meeting or board ids are not errors: adapters answer them with
placeholder records so a tool call never aborts the agent loop.
"""

from typing import Iterable, Optional

__all__ = [
    "GovernmentRecordsError",
    "ConfigurationError",
    "AdapterConnectionError",
    "FetchError",
    "UpstreamModelError",
]


class GovernmentRecordsError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(GovernmentRecordsError):
    """Requested municipality is not registered, or a credential is missing."""

    def __init__(self, message: str, available: Optional[Iterable[str]] = None):
        self.available = list(available or [])
        super().__init__(message)

    @classmethod
    def unknown_municipality(
        cls, municipality: str, available: Iterable[str]
    ) -> "ConfigurationError":
        names = sorted(available)
        return cls(
            f"Unknown municipality: {municipality}. "
            f"Available municipalities: {', '.join(names) or 'none'}",
            available=names,
        )


class AdapterConnectionError(GovernmentRecordsError, ConnectionError):
    """The adapter's session resource could not be acquired."""


class FetchError(GovernmentRecordsError):
    """A portal page could not be fetched (timeout, transport error, non-2xx)."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


class UpstreamModelError(GovernmentRecordsError):
    """The LLM provider failed or returned something unusable."""
