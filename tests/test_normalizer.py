"""Unit tests for the response normalizer."""

from conftest import make_hit

from tmsearch.parsing.models import DisplayRecord
from tmsearch.parsing.normalizer import normalize_hit, normalize_hits, record_to_dict


def test_normalize_empty_hit_list():
    """Test that no hits means no records and no error."""
    assert normalize_hits([]) == []


def test_normalize_non_list_input():
    """Test that a non-list payload yields no records."""
    assert normalize_hits(None) == []
    assert normalize_hits({"hits": []}) == []
    assert normalize_hits("tesla") == []


def test_normalize_maps_source_fields(tesla_hit):
    """Test field mapping from _source to DisplayRecord."""
    record = normalize_hit(tesla_hit)

    assert record.description == ("Electric vehicles",)
    assert record.class_codes == ("012",)
    assert record.status_type == "live"
    assert record.status_date == 1600000000
    assert record.renewal_date == 1700000000
    assert record.registration_date == 1000000000
    assert record.registration_number == "4000001"
    assert record.current_owner == "Tesla, Inc."


def test_normalize_preserves_service_order(tesla_hit, spacex_hit):
    """Test that relevance order from the service is kept."""
    records = normalize_hits([spacex_hit, tesla_hit])
    assert [r.current_owner for r in records] == ["SpaceX", "Tesla, Inc."]


def test_normalize_missing_source_yields_defaults():
    """Test that hits without _source degrade to an all-default record."""
    for hit in [{}, {"_source": None}, {"_source": "oops"}, None, 42, ["a"]]:
        assert normalize_hit(hit) == DisplayRecord()


def test_normalize_missing_fields_default():
    """Test that each absent field falls back to its empty/zero default."""
    record = normalize_hit({"_source": {"current_owner": "Acme"}})

    assert record.current_owner == "Acme"
    assert record.description == ()
    assert record.class_codes == ()
    assert record.status_type == ""
    assert record.status_date == 0
    assert record.renewal_date == 0
    assert record.registration_date == 0
    assert record.registration_number == ""


def test_normalize_malformed_fields_degrade():
    """Test that wrongly typed fields never raise."""
    hit = make_hit(
        mark_description_description="single string",
        class_codes=[9, None, "009", {"x": 1}],
        status_type=None,
        status_date="1600000000",
        renewal_date="not a date",
        registration_date=True,
        registration_number=1234567,
        current_owner=["not", "a", "string"],
    )
    record = normalize_hit(hit)

    assert record.description == ("single string",)
    assert record.class_codes == ("9", "009")
    assert record.status_type == ""
    assert record.status_date == 1600000000
    assert record.renewal_date == 0
    assert record.registration_date == 0
    assert record.registration_number == "1234567"
    assert record.current_owner == ""


def test_normalize_float_timestamps():
    """Test float and non-finite timestamps."""
    record = normalize_hit(make_hit(status_date=1600000000.9, renewal_date=float("nan"), registration_date="1e3"))
    assert record.status_date == 1600000000
    assert record.renewal_date == 0
    assert record.registration_date == 1000


def test_normalize_class_codes_deduplicated_in_order():
    """Test that class codes behave as an insertion-ordered set."""
    record = normalize_hit(make_hit(class_codes=["039", "012", "039", "009", "012"]))
    assert record.class_codes == ("039", "012", "009")


def test_normalize_keeps_full_description():
    """Test that truncation is not applied at normalization time."""
    long_text = "x" * 500
    record = normalize_hit(make_hit(mark_description_description=[long_text, "tail"]))
    assert record.description_text == long_text + " tail"


def test_record_to_dict_uses_camel_case(tesla_hit):
    """Test the export form of a record."""
    data = record_to_dict(normalize_hit(tesla_hit))
    assert data["statusType"] == "live"
    assert data["currentOwner"] == "Tesla, Inc."
    assert data["classCodes"] == ["012"]
    assert data["description"] == ["Electric vehicles"]
    assert data["registrationDate"] == 1000000000
