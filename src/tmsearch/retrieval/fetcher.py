"""Result fetcher: one search per query, failures collapsed into a result."""

import time
from typing import List, Optional

from pydantic import BaseModel, Field

from tmsearch.parsing.models import DisplayRecord
from tmsearch.parsing.normalizer import normalize_hits
from tmsearch.retrieval.client import SearchClient
from tmsearch.retrieval.errors import EmptyQuery, SearchError
from tmsearch.utils.logging import get_logger
from tmsearch.utils.time import utc_now_z

logger = get_logger(__name__)

STATUS_SUCCESS = "SUCCESS"
STATUS_FAILURE = "FAILURE"
STATUS_SKIPPED = "SKIPPED"


class FetchResult(BaseModel):
    """Outcome of fetching results for one query."""

    query: str
    fetched_at_utc: str  # ISO 8601
    status: str  # SUCCESS | FAILURE | SKIPPED
    status_code: Optional[int] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None  # NetworkFailure | MalformedResponse
    duration_seconds: Optional[float] = None
    records: List[DisplayRecord] = Field(default_factory=list)
    total_hits: Optional[int] = None
    bytes_downloaded: int = 0

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS


class ResultFetcher:
    """Fetches and normalizes search results for a query."""

    def __init__(self, client: Optional[SearchClient] = None):
        self.client = client if client is not None else SearchClient()

    def fetch(self, query: str) -> FetchResult:
        """
        Fetch results for a query.

        Never raises for search failures: network errors, bad status codes and
        malformed bodies are returned as a FAILURE result, an empty query as
        SKIPPED (no request issued).

        Args:
            query: Search term

        Returns:
            FetchResult with normalized records on SUCCESS
        """
        fetched_at_utc = utc_now_z()
        start_time = time.monotonic()

        try:
            response = self.client.search(query)
        except EmptyQuery:
            logger.debug("Empty query, skipping fetch")
            return FetchResult(query=query, fetched_at_utc=fetched_at_utc, status=STATUS_SKIPPED)
        except SearchError as e:
            duration_seconds = time.monotonic() - start_time
            logger.error(f"Failed to fetch results for {query!r}: {e}")
            return FetchResult(
                query=query,
                fetched_at_utc=fetched_at_utc,
                status=STATUS_FAILURE,
                status_code=e.status_code,
                error=str(e),
                error_kind=e.kind,
                duration_seconds=duration_seconds,
            )

        records = normalize_hits(response.hits)
        duration_seconds = time.monotonic() - start_time
        logger.info(f"Fetched {len(records)} results for {query!r} in {duration_seconds:.2f}s")

        return FetchResult(
            query=query,
            fetched_at_utc=fetched_at_utc,
            status=STATUS_SUCCESS,
            status_code=response.status_code,
            duration_seconds=duration_seconds,
            records=records,
            total_hits=response.total,
            bytes_downloaded=response.bytes_downloaded,
        )
