"""Query source: reads the active search term from navigable state."""

from typing import Callable, Dict, List, Mapping, Optional, Union
from urllib.parse import parse_qs, quote, urlsplit

from pydantic import BaseModel

from tmsearch.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_QUERY_PARAM = "q"

Location = Union[str, Mapping[str, object]]


class WildcardSuggestion(BaseModel):
    """An alternative query offered next to the result header."""

    label: str
    query: str
    location: str


def _first_value(value: object) -> str:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else ""
    if value is None:
        return ""
    return str(value)


def extract_query(location: Optional[Location], param: str = DEFAULT_QUERY_PARAM) -> str:
    """
    Extract the search term from a location.

    Accepts a full URL, a path with query string ('/?q=tesla'), a bare query
    string ('q=tesla') or an already-parsed parameter mapping. The value is
    URL-decoded and stripped; a missing parameter yields ''.

    Text without a '?', scheme or leading '/' is read as a query string, so
    a bare word such as 'tesla' (no '=') carries no parameter and yields ''.
    Navigating there clears the results like any other empty query.
    """
    if location is None:
        return ""

    if isinstance(location, Mapping):
        return _first_value(location.get(param)).strip()

    text = str(location)
    if "?" in text or "://" in text or text.startswith("/"):
        query_string = urlsplit(text).query
    else:
        query_string = text

    params: Dict[str, List[str]] = parse_qs(query_string, keep_blank_values=True)
    if param not in params:
        logger.debug(f"No {param!r} parameter in location {text!r}")
    return _first_value(params.get(param)).strip()


def build_search_location(query: str, param: str = DEFAULT_QUERY_PARAM) -> str:
    """Build the location the search box navigates to, e.g. '/?q=tesla%20inc'."""
    return f"/?{param}={quote(query, safe='')}"


def wildcard_suggestions(query: str, param: str = DEFAULT_QUERY_PARAM) -> List[WildcardSuggestion]:
    """
    Offer prefix and suffix wildcard variants of the active query.

    Returns an empty list when there is no active query.
    """
    query = (query or "").strip()
    if not query:
        return []
    variants = [f"{query}*", f"*{query}"]
    return [
        WildcardSuggestion(label=variant, query=variant, location=build_search_location(variant, param))
        for variant in variants
    ]


class QuerySource:
    """Holds the current search term and signals changes to subscribers."""

    def __init__(self, param: str = DEFAULT_QUERY_PARAM, initial: str = ""):
        self.param = param
        self._query = (initial or "").strip()
        self._subscribers: List[Callable[[str], None]] = []

    @property
    def query(self) -> str:
        return self._query

    def subscribe(self, callback: Callable[[str], None]) -> None:
        """Register a callback invoked with the new term on every change."""
        self._subscribers.append(callback)

    def update(self, location: Optional[Location]) -> bool:
        """
        Re-read the term from a location.

        Returns:
            True if the term changed (subscribers were notified), False otherwise
        """
        return self.set(extract_query(location, self.param))

    def set(self, query: str) -> bool:
        """Set the term directly; same semantics as update()."""
        query = (query or "").strip()
        if query == self._query:
            return False
        logger.debug(f"Query changed: {self._query!r} -> {query!r}")
        self._query = query
        for callback in list(self._subscribers):
            callback(query)
        return True
