"""Pytest configuration and fixtures."""

from typing import Dict, List, Optional

import pytest

from tmsearch.config.loader import get_display_settings
from tmsearch.parsing.normalizer import normalize_hits
from tmsearch.retrieval.fetcher import STATUS_FAILURE, STATUS_SUCCESS, FetchResult


def make_hit(**source_fields) -> Dict:
    """Build a raw hit the way the service returns it."""
    source = {
        "mark_description_description": ["Electric vehicles"],
        "class_codes": ["012"],
        "status_type": "registered",
        "status_date": 1600000000,
        "renewal_date": 1700000000,
        "registration_date": 1000000000,
        "registration_number": "1234567",
        "current_owner": "Tesla, Inc.",
    }
    source.update(source_fields)
    return {"_index": "us", "_id": source["registration_number"], "_source": source}


def make_response(hits: List[Dict], total: Optional[int] = None) -> Dict:
    hits_section: Dict = {"hits": hits}
    if total is not None:
        hits_section["total"] = {"value": total, "relation": "eq"}
    return {"body": {"hits": hits_section}}


@pytest.fixture
def tesla_hit():
    return make_hit(status_type="live", current_owner="Tesla, Inc.", registration_number="4000001")


@pytest.fixture
def spacex_hit():
    return make_hit(
        status_type="registered",
        current_owner="SpaceX",
        registration_number="4000002",
        mark_description_description=["Rockets", "launch services"],
        class_codes=["012", "039"],
    )


@pytest.fixture
def mixed_records(tesla_hit, spacex_hit):
    """Four records with assorted statuses and owners, in service order."""
    hits = [
        tesla_hit,
        spacex_hit,
        make_hit(status_type="Abandoned", current_owner="LegalForce RAPC", registration_number="4000003"),
        make_hit(status_type="REGISTERED", current_owner="tesla motors", registration_number="4000004"),
    ]
    return normalize_hits(hits)


@pytest.fixture
def display_settings():
    return get_display_settings({})


class FakeFetcher:
    """Fetcher double returning canned outcomes per query and recording calls."""

    def __init__(self, responses: Optional[Dict[str, List[Dict]]] = None, failures: Optional[Dict[str, str]] = None):
        self.responses = responses or {}
        self.failures = failures or {}
        self.calls: List[str] = []

    def fetch(self, query: str) -> FetchResult:
        self.calls.append(query)
        if query in self.failures:
            return FetchResult(
                query=query,
                fetched_at_utc="2024-01-01T00:00:00Z",
                status=STATUS_FAILURE,
                error=self.failures[query],
                error_kind="NetworkFailure",
            )
        return FetchResult(
            query=query,
            fetched_at_utc="2024-01-01T00:00:00Z",
            status=STATUS_SUCCESS,
            records=normalize_hits(self.responses.get(query, [])),
        )


@pytest.fixture
def fake_fetcher_cls():
    return FakeFetcher
