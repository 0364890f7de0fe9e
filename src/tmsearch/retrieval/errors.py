"""Exceptions raised by the search client."""

from typing import Optional


class SearchError(Exception):
    """Base class for search failures."""

    kind = "SearchError"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkFailure(SearchError):
    """The request could not complete or returned a non-success status."""

    kind = "NetworkFailure"


class MalformedResponse(SearchError):
    """The body was not JSON or lacked the body.hits.hits structure."""

    kind = "MalformedResponse"


class EmptyQuery(SearchError):
    """No active query; nothing was requested. Not a true failure."""

    kind = "EmptyQuery"
