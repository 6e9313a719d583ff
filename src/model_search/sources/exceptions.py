"""Exceptions for model source adapters.

Adapters raise these internally; ``ModelSource`` converts every one of them
into an empty result before it reaches a caller.
"""


class SourceError(Exception):
    """Base exception for all source adapter errors."""


class UpstreamStatusError(SourceError):
    """Upstream answered with a non-success HTTP status."""

    def __init__(self, source: str, status_code: int) -> None:
        super().__init__(f"{source} responded with HTTP {status_code}")
        self.status_code = status_code


class SourcePayloadError(SourceError):
    """Upstream payload did not have the expected shape."""
