"""Normalize raw search hits into DisplayRecord models.

Normalization is total: any hit, however malformed, yields a record. Missing
or mistyped fields fall back to '', 0 or an empty tuple.
"""

import math
from typing import Any, Dict, List, Mapping, Tuple

from tmsearch.parsing.models import DisplayRecord


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return ""
        return str(value)
    return ""


def _as_epoch_seconds(value: Any) -> int:
    """Coerce a timestamp field to whole seconds.

    Fractional values are truncated toward zero; booleans, NaN, infinities and
    junk strings become 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return 0
        return int(number) if math.isfinite(number) else 0
    return 0


def _as_text_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value] if value else []
    if not isinstance(value, (list, tuple)):
        return []
    items = []
    for entry in value:
        text = _as_text(entry)
        if text:
            items.append(text)
    return items


def _unique_in_order(values: List[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def normalize_hit(hit: Any) -> DisplayRecord:
    """
    Turn one raw hit into a DisplayRecord.

    Only hit['_source'] is read, and within it only the fields the display
    model needs. Anything else in the payload is ignored.
    """
    source: Mapping[str, Any] = {}
    if isinstance(hit, Mapping):
        candidate = hit.get("_source")
        if isinstance(candidate, Mapping):
            source = candidate

    return DisplayRecord(
        description=tuple(_as_text_list(source.get("mark_description_description"))),
        class_codes=_unique_in_order(_as_text_list(source.get("class_codes"))),
        status_type=_as_text(source.get("status_type")),
        status_date=_as_epoch_seconds(source.get("status_date")),
        renewal_date=_as_epoch_seconds(source.get("renewal_date")),
        registration_date=_as_epoch_seconds(source.get("registration_date")),
        registration_number=_as_text(source.get("registration_number")),
        current_owner=_as_text(source.get("current_owner")),
    )


def normalize_hits(raw_hits: Any) -> List[DisplayRecord]:
    """
    Normalize a hit list, preserving the service's (relevance) order.

    Args:
        raw_hits: Sequence of raw hit dicts as found at body.hits.hits

    Returns:
        One DisplayRecord per hit; [] for an empty or non-list input
    """
    if not isinstance(raw_hits, (list, tuple)):
        return []
    return [normalize_hit(hit) for hit in raw_hits]


def record_to_dict(record: DisplayRecord) -> Dict[str, Any]:
    """Export form of a record with camelCase keys and JSON-native lists."""
    data = record.model_dump(by_alias=True)
    data["description"] = list(data["description"])
    data["classCodes"] = list(data["classCodes"])
    return data
