"""Exception types shared across hnclient.

// [LAW:one-source-of-truth] Every error the navigator distinguishes is declared here.
"""

from __future__ import annotations


class HnClientError(Exception):
    """Base class for hnclient errors."""


class FetchError(HnClientError):
    """A remote collaborator answered with a non-success HTTP status."""

    def __init__(self, message: str, status: int | None = None, url: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.url = url


class CacheWriteError(HnClientError):
    """The cache document could not be persisted to disk."""

    def __init__(self, path, cause: BaseException | None = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"could not write cache file {path}{detail}")
        self.path = path
        self.cause = cause


class StartupError(HnClientError):
    """Fatal error before the UI starts (exit code 1)."""
