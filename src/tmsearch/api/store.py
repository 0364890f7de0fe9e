"""Search store: the single owner of query, results, loading and filter state."""

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from tmsearch.config.loader import ALLOWED_DISPLAY_MODES, get_display_settings
from tmsearch.filters.engine import apply_filters, owner_toggles, status_toggles
from tmsearch.filters.models import FacetToggle, FilterState
from tmsearch.output.columns import Cell, build_columns, empty_state_text, headers, project_rows
from tmsearch.parsing.models import DisplayRecord
from tmsearch.query.source import (
    DEFAULT_QUERY_PARAM,
    Location,
    QuerySource,
    WildcardSuggestion,
    extract_query,
    wildcard_suggestions,
)
from tmsearch.retrieval.fetcher import FetchResult, ResultFetcher
from tmsearch.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchTicket:
    """Identifies one issued request: the query it was for and its sequence number."""

    query: str
    seq: int


class SearchView(BaseModel):
    """Read model handed to rendering collaborators."""

    query: str
    loading: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None
    result_count: int = 0
    total_hits: Optional[int] = None
    visible: List[DisplayRecord] = Field(default_factory=list)
    headers: List[str] = Field(default_factory=list)
    rows: List[List[Cell]] = Field(default_factory=list)
    filters: Dict[str, str] = Field(default_factory=dict)
    status_toggles: List[FacetToggle] = Field(default_factory=list)
    owner_toggles: List[FacetToggle] = Field(default_factory=list)
    display_mode: str = "list"
    empty_state: Optional[str] = None
    suggestions: List[WildcardSuggestion] = Field(default_factory=list)


class SearchStore:
    """
    Explicit state for one search page.

    Results are only ever replaced wholesale, and only by the response to the
    most recently issued request. A response is applied when its ticket is the
    latest one and its query is still the current query; anything else is
    stale and dropped without touching results, loading or error.

    Empty-query policy: setting an empty query clears the results and error
    and invalidates any request still in flight.

    The store subscribes to its QuerySource, so query_source.update() or
    query_source.set() from outside fetches just like set_query().
    """

    def __init__(
        self,
        fetcher: Optional[ResultFetcher] = None,
        display_settings: Optional[Dict] = None,
        query_param: str = DEFAULT_QUERY_PARAM,
    ):
        if display_settings is None:
            display_settings = get_display_settings()

        self.fetcher = fetcher if fetcher is not None else ResultFetcher()
        self.query_source = QuerySource(param=query_param)
        self.status_categories: List[str] = list(display_settings["status_categories"])
        self.owner_facets: List[str] = list(display_settings["owner_facets"])
        self.owner_case_sensitive: bool = display_settings["owner_case_sensitive"]
        self.columns = build_columns(display_settings["description_max_length"])

        self._display_mode: str = display_settings["display_mode"]
        self._results: Tuple[DisplayRecord, ...] = ()
        self._total_hits: Optional[int] = None
        self._loading = False
        self._error: Optional[str] = None
        self._error_kind: Optional[str] = None
        self._filters = FilterState()
        self._seq = 0
        self._adopting = False

        # Term changes made directly on the query source run the pipeline too
        self.query_source.subscribe(self._on_query_changed)

    # Read surface

    @property
    def query(self) -> str:
        return self.query_source.query

    @property
    def results(self) -> Tuple[DisplayRecord, ...]:
        return self._results

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def filters(self) -> FilterState:
        return self._filters

    @property
    def display_mode(self) -> str:
        return self._display_mode

    @property
    def visible(self) -> List[DisplayRecord]:
        return apply_filters(self._results, self._filters, case_sensitive=self.owner_case_sensitive)

    def snapshot(self) -> SearchView:
        """Assemble the current read model."""
        visible = self.visible
        return SearchView(
            query=self.query,
            loading=self._loading,
            error=self._error,
            error_kind=self._error_kind,
            result_count=len(self._results),
            total_hits=self._total_hits,
            visible=visible,
            headers=headers(self.columns),
            rows=project_rows(visible, self.columns),
            filters=self._filters.as_mapping(),
            status_toggles=status_toggles(self._results, self._filters, self.status_categories),
            owner_toggles=owner_toggles(
                self._results,
                self._filters,
                self.owner_facets,
                case_sensitive=self.owner_case_sensitive,
            ),
            display_mode=self._display_mode,
            empty_state=None if self._loading else empty_state_text(self.query, len(self._results), len(visible)),
            suggestions=wildcard_suggestions(self.query, self.query_source.param),
        )

    # Fetch lifecycle

    def _on_query_changed(self, query: str) -> None:
        # Changes made through the store's own methods are fetched by those methods
        if self._adopting:
            return
        self._complete(self._open_ticket())

    def _adopt_query(self, query: str) -> bool:
        self._adopting = True
        try:
            return self.query_source.set(query)
        finally:
            self._adopting = False

    def _open_ticket(self) -> Optional[FetchTicket]:
        self._seq += 1

        if not self.query:
            self._results = ()
            self._total_hits = None
            self._error = None
            self._error_kind = None
            self._loading = False
            return None

        self._loading = True
        return FetchTicket(query=self.query, seq=self._seq)

    def begin_fetch(self, query: str) -> Optional[FetchTicket]:
        """
        Make query current and open a new request for it.

        Returns:
            The ticket to resolve with, or None for an empty query (no request;
            results cleared)
        """
        self._adopt_query(query)
        return self._open_ticket()

    def is_stale(self, ticket: FetchTicket) -> bool:
        return ticket.seq != self._seq or ticket.query != self.query

    def resolve_fetch(self, ticket: FetchTicket, result: FetchResult) -> bool:
        """
        Apply a fetch outcome if it is still current.

        Returns:
            True if applied, False if the response was stale and dropped
        """
        if self.is_stale(ticket):
            logger.debug(f"Dropping stale response for {ticket.query!r} (current {self.query!r})")
            return False

        self._loading = False
        if result.ok:
            self._results = tuple(result.records)
            self._total_hits = result.total_hits
            self._error = None
            self._error_kind = None
        else:
            self._results = ()
            self._total_hits = None
            self._error = result.error
            self._error_kind = result.error_kind
            logger.warning(f"Showing empty results for {ticket.query!r}: {result.error}")
        return True

    def abort_fetch(self, ticket: FetchTicket, error: BaseException) -> bool:
        """
        Close a request that ended without a FetchResult (cancelled or raised).

        A current ticket ends loading and leaves an empty result set with the
        error recorded; a stale one is ignored like a stale response.

        Returns:
            True if the store state was updated
        """
        if self.is_stale(ticket):
            return False

        self._loading = False
        self._results = ()
        self._total_hits = None
        self._error = str(error) or type(error).__name__
        self._error_kind = type(error).__name__
        logger.error(f"Search for {ticket.query!r} ended without a response: {self._error_kind}")
        return True

    def _changed(self, query: str) -> bool:
        return (query or "").strip() != self.query

    def set_query(self, query: str) -> Optional[FetchResult]:
        """
        Run the pipeline for a new query (blocking).

        An unchanged query issues no request. Returns the FetchResult, or None
        when nothing was fetched.
        """
        if not self._changed(query):
            return None
        return self._run(query)

    def navigate(self, location: Location) -> Optional[FetchResult]:
        """Read the query from a URL/location and run set_query with it."""
        return self.set_query(extract_query(location, self.query_source.param))

    def refresh(self) -> Optional[FetchResult]:
        """Re-issue the request for the current query."""
        return self._run(self.query)

    def _run(self, query: str) -> Optional[FetchResult]:
        return self._complete(self.begin_fetch(query))

    def _complete(self, ticket: Optional[FetchTicket]) -> Optional[FetchResult]:
        if ticket is None:
            return None
        try:
            result = self.fetcher.fetch(ticket.query)
        except Exception as e:
            self.abort_fetch(ticket, e)
            raise
        self.resolve_fetch(ticket, result)
        return result

    async def run_query_async(self, query: str) -> Optional[FetchResult]:
        """
        Cooperative variant of set_query for use on an event loop.

        The blocking fetch runs in a worker thread; state is only touched on
        the loop thread, so no locking is needed. If the awaiting task is
        cancelled the request is closed before the cancellation propagates.
        """
        if not self._changed(query):
            return None
        ticket = self.begin_fetch(query)
        if ticket is None:
            return None
        try:
            result = await asyncio.to_thread(self.fetcher.fetch, ticket.query)
        except BaseException as e:
            self.abort_fetch(ticket, e)
            raise
        self.resolve_fetch(ticket, result)
        return result

    # Filter and display updates

    def set_filters(self, filters: FilterState) -> FilterState:
        """Replace the whole filter state (e.g. one built with FilterState.from_mapping)."""
        self._filters = filters
        return self._filters

    def toggle_status(self, category: str) -> FilterState:
        self._filters = self._filters.toggle_status(category)
        return self._filters

    def set_owner_pattern(self, pattern: Optional[str]) -> FilterState:
        self._filters = self._filters.with_owner(pattern)
        return self._filters

    def toggle_owner(self, name: str) -> FilterState:
        self._filters = self._filters.toggle_owner(name)
        return self._filters

    def clear_filters(self) -> FilterState:
        self._filters = FilterState()
        return self._filters

    def set_display_mode(self, mode: str) -> str:
        """
        Switch between list and grid display.

        Raises:
            ValueError: For modes other than list and grid
        """
        if mode not in ALLOWED_DISPLAY_MODES:
            raise ValueError(f"Unknown display mode: {mode}")
        self._display_mode = mode
        return mode
