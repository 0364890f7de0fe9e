"""Tests for the search HTTP client."""

import json
from unittest.mock import Mock

import pytest
import requests

import tmsearch.retrieval.client as client_mod
from conftest import make_hit, make_response
from tmsearch.config.loader import DEFAULT_ENDPOINT, get_search_settings
from tmsearch.retrieval.client import SearchClient, build_search_payload, parse_search_response
from tmsearch.retrieval.errors import EmptyQuery, MalformedResponse, NetworkFailure


def _fake_response(data=None, status_code=200, raw=None):
    response = Mock()
    response.status_code = status_code
    body = raw if raw is not None else json.dumps(data)
    response.content = body.encode("utf-8")
    if raw is not None:
        response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", raw, 0)
    else:
        response.json.return_value = data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error", response=response)
    else:
        response.raise_for_status.return_value = None
    return response


def test_build_search_payload_defaults():
    """Test the fixed request body."""
    payload = build_search_payload("tesla")
    assert payload == {
        "input_query": "tesla",
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
        "page": 1,
        "rows": 10,
        "sort_order": "desc",
        "states": [],
        "counties": [],
    }


def test_search_posts_once_and_returns_hits(monkeypatch, tesla_hit):
    """Test a successful search request."""
    post = Mock(return_value=_fake_response(make_response([tesla_hit], total=37)))
    monkeypatch.setattr(client_mod.requests, "post", post)

    client = SearchClient(get_search_settings({"search": {"rows": 25, "user_agent": "test-agent"}}))
    response = client.search("  tesla ")

    assert post.call_count == 1
    args, kwargs = post.call_args
    assert args[0] == DEFAULT_ENDPOINT
    assert kwargs["json"]["input_query"] == "tesla"
    assert kwargs["json"]["rows"] == 25
    assert kwargs["headers"]["User-Agent"] == "test-agent"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["timeout"] == 20

    assert response.hits == [tesla_hit]
    assert response.total == 37
    assert response.status_code == 200
    assert response.bytes_downloaded > 0


def test_search_empty_query_issues_no_request(monkeypatch):
    """Test that empty and whitespace-only queries are no-ops."""
    post = Mock()
    monkeypatch.setattr(client_mod.requests, "post", post)

    client = SearchClient()
    for query in ["", "   ", None]:
        with pytest.raises(EmptyQuery):
            client.search(query)
    post.assert_not_called()


def test_search_network_error(monkeypatch):
    """Test that transport errors become NetworkFailure."""
    monkeypatch.setattr(
        client_mod.requests,
        "post",
        Mock(side_effect=requests.ConnectionError("connection refused")),
    )
    with pytest.raises(NetworkFailure) as exc_info:
        SearchClient().search("tesla")
    assert exc_info.value.status_code is None
    assert "connection refused" in str(exc_info.value)


def test_search_non_success_status(monkeypatch):
    """Test that HTTP errors become NetworkFailure with the status code."""
    monkeypatch.setattr(client_mod.requests, "post", Mock(return_value=_fake_response({}, status_code=502)))
    with pytest.raises(NetworkFailure) as exc_info:
        SearchClient().search("tesla")
    assert exc_info.value.status_code == 502
    assert exc_info.value.kind == "NetworkFailure"


def test_search_invalid_json(monkeypatch):
    """Test that a non-JSON body becomes MalformedResponse."""
    monkeypatch.setattr(client_mod.requests, "post", Mock(return_value=_fake_response(raw="<html>oops</html>")))
    with pytest.raises(MalformedResponse) as exc_info:
        SearchClient().search("tesla")
    assert exc_info.value.status_code == 200


def test_search_missing_structure(monkeypatch):
    """Test that a JSON body without body.hits.hits becomes MalformedResponse."""
    monkeypatch.setattr(client_mod.requests, "post", Mock(return_value=_fake_response({"body": {"hits": {}}})))
    with pytest.raises(MalformedResponse, match="body/hits"):
        SearchClient().search("tesla")


def test_search_uses_session_when_given(tesla_hit):
    """Test that an injected requests session is used for the POST."""
    session = Mock()
    session.post.return_value = _fake_response(make_response([tesla_hit]))

    response = SearchClient(session=session).search("tesla")

    session.post.assert_called_once()
    assert len(response.hits) == 1


@pytest.mark.parametrize(
    "data",
    [
        None,
        [],
        "body",
        {},
        {"body": None},
        {"body": {}},
        {"body": {"hits": []}},
        {"body": {"hits": {"hits": {"0": {}}}}},
    ],
)
def test_parse_search_response_rejects_bad_shapes(data):
    """Test the envelope validation."""
    with pytest.raises(MalformedResponse):
        parse_search_response(data)


def test_parse_search_response_keeps_hits_opaque():
    """Test that individual hits are not validated at this layer."""
    parsed = parse_search_response(make_response([make_hit(), "junk", None]))
    assert len(parsed.hits) == 3
    assert parsed.total is None


def test_parse_search_response_integer_total():
    """Test a plain integer total."""
    parsed = parse_search_response({"body": {"hits": {"hits": [], "total": 5}}})
    assert parsed.total == 5
