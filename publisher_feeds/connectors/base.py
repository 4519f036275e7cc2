"""Connector abstraction and errors."""

from __future__ import annotations

from typing import Optional, Protocol


class ConnectorError(Exception):
    """Base connector error."""


class FetchError(ConnectorError):
    """A feed could not be retrieved (timeout, transport error, non-2xx)."""

    def __init__(self, url: str, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FeedFetcher(Protocol):
    def fetch(self, url: str) -> Optional[str]: ...  # noqa: D401
