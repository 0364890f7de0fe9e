"""HTTP client for the remote trademark search service."""

from typing import Any, Dict, List, Optional

import requests
from jsonschema import Draft202012Validator
from pydantic import BaseModel, Field

from tmsearch.config.loader import get_search_settings
from tmsearch.retrieval.errors import EmptyQuery, MalformedResponse, NetworkFailure
from tmsearch.utils.logging import get_logger

logger = get_logger(__name__)

# Only the path down to the hit list is required; hits themselves stay opaque.
SEARCH_RESPONSE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["body"],
    "properties": {
        "body": {
            "type": "object",
            "required": ["hits"],
            "properties": {
                "hits": {
                    "type": "object",
                    "required": ["hits"],
                    "properties": {
                        "hits": {"type": "array"},
                    },
                },
            },
        },
    },
}

_RESPONSE_VALIDATOR = Draft202012Validator(SEARCH_RESPONSE_SCHEMA)


class SearchResponse(BaseModel):
    """Raw hits plus transport diagnostics for fetcher consumption."""

    hits: List[Any] = Field(default_factory=list)
    total: Optional[int] = None
    status_code: Optional[int] = None
    bytes_downloaded: int = 0


def build_search_payload(query: str, page: int = 1, rows: int = 10) -> Dict[str, Any]:
    """
    Build the POST body for a plain text query.

    All server-side filters stay at their empty defaults; filtering happens
    client-side on the returned page.
    """
    return {
        "input_query": query,
        "input_query_type": "",
        "sort_by": "default",
        "status": [],
        "exact_match": False,
        "date_query": False,
        "owners": [],
        "attorneys": [],
        "law_firms": [],
        "mark_description_description": [],
        "classes": [],
        "page": page,
        "rows": rows,
        "sort_order": "desc",
        "states": [],
        "counties": [],
    }


def _extract_total(hits_section: Dict[str, Any]) -> Optional[int]:
    """Read the service-reported hit count (Elasticsearch style) if present."""
    total = hits_section.get("total")
    if isinstance(total, dict):
        total = total.get("value")
    if isinstance(total, int) and not isinstance(total, bool):
        return total
    return None


def parse_search_response(data: Any) -> SearchResponse:
    """
    Validate a decoded response body and pull out body.hits.hits.

    Raises:
        MalformedResponse: If the expected top-level structure is missing
    """
    errors = sorted(_RESPONSE_VALIDATOR.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        first = errors[0]
        where = "/".join(str(p) for p in first.path) or "<root>"
        raise MalformedResponse(f"Unexpected response shape at {where}: {first.message}")

    hits_section = data["body"]["hits"]
    return SearchResponse(hits=list(hits_section["hits"]), total=_extract_total(hits_section))


class SearchClient:
    """Issues search requests against the configured endpoint."""

    def __init__(self, search_settings: Optional[Dict] = None, session: Optional[requests.Session] = None):
        """
        Initialize client.

        Args:
            search_settings: Resolved settings from get_search_settings(). If None, built-in defaults.
            session: Optional requests session (a new one-off request is used otherwise)
        """
        if search_settings is None:
            search_settings = get_search_settings()

        self.endpoint = search_settings["endpoint"]
        self.timeout = search_settings["timeout_seconds"]
        self.user_agent = search_settings["user_agent"]
        self.page = search_settings["page"]
        self.rows = search_settings["rows"]
        self.session = session

    def _get_headers(self) -> Dict[str, str]:
        """Get HTTP headers for requests."""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def search(self, query: str) -> SearchResponse:
        """
        Run one search request.

        Raises:
            EmptyQuery: If the query is empty or whitespace-only (no request is made)
            NetworkFailure: On transport errors or non-success HTTP status
            MalformedResponse: If the body is not JSON or lacks body.hits.hits
        """
        query = (query or "").strip()
        if not query:
            raise EmptyQuery("Empty query; no request issued")

        payload = build_search_payload(query, page=self.page, rows=self.rows)
        post = self.session.post if self.session is not None else requests.post

        try:
            response = post(
                self.endpoint,
                json=payload,
                headers=self._get_headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            status_code = None
            if getattr(e, "response", None) is not None:
                status_code = e.response.status_code
            raise NetworkFailure(f"Search request for {query!r} failed: {e}", status_code=status_code) from e

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse(
                f"Search response for {query!r} is not valid JSON: {e}",
                status_code=response.status_code,
            ) from e

        try:
            parsed = parse_search_response(data)
        except MalformedResponse as e:
            e.status_code = response.status_code
            raise

        parsed.status_code = response.status_code
        parsed.bytes_downloaded = len(response.content or b"")
        logger.debug(f"Search {query!r} returned {len(parsed.hits)} hits from {self.endpoint}")
        return parsed
