from unittest.mock import Mock

import tmsearch.retrieval.fetcher as fetcher_mod
from tmsearch.retrieval.client import SearchResponse
from tmsearch.retrieval.errors import EmptyQuery, MalformedResponse, NetworkFailure
from tmsearch.retrieval.fetcher import STATUS_FAILURE, STATUS_SKIPPED, STATUS_SUCCESS, ResultFetcher


def test_fetch_success_normalizes_records(tesla_hit, spacex_hit):
    client = Mock()
    client.search.return_value = SearchResponse(
        hits=[tesla_hit, spacex_hit], total=2, status_code=200, bytes_downloaded=512
    )

    result = ResultFetcher(client).fetch("tesla")

    client.search.assert_called_once_with("tesla")
    assert result.status == STATUS_SUCCESS
    assert result.ok is True
    assert [r.current_owner for r in result.records] == ["Tesla, Inc.", "SpaceX"]
    assert result.total_hits == 2
    assert result.status_code == 200
    assert result.bytes_downloaded == 512
    assert result.error is None
    assert result.fetched_at_utc.endswith("Z")


def test_fetch_network_failure_is_collapsed():
    client = Mock()
    client.search.side_effect = NetworkFailure("boom", status_code=503)

    result = ResultFetcher(client).fetch("tesla")

    assert result.status == STATUS_FAILURE
    assert result.ok is False
    assert result.records == []
    assert result.error == "boom"
    assert result.error_kind == "NetworkFailure"
    assert result.status_code == 503


def test_fetch_malformed_response_is_collapsed():
    client = Mock()
    client.search.side_effect = MalformedResponse("bad shape")

    result = ResultFetcher(client).fetch("tesla")

    assert result.status == STATUS_FAILURE
    assert result.error_kind == "MalformedResponse"
    assert result.records == []


def test_fetch_empty_query_is_skipped():
    client = Mock()
    client.search.side_effect = EmptyQuery("empty")

    result = ResultFetcher(client).fetch("  ")

    assert result.status == STATUS_SKIPPED
    assert result.error is None
    assert result.records == []


def test_fetch_records_duration(monkeypatch):
    ticks = iter([10.0, 12.5])
    monkeypatch.setattr(fetcher_mod.time, "monotonic", lambda: next(ticks))
    client = Mock()
    client.search.return_value = SearchResponse(hits=[])

    result = ResultFetcher(client).fetch("tesla")

    assert result.duration_seconds == 2.5
    assert result.records == []
    assert result.status == STATUS_SUCCESS
