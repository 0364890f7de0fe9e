"""Filter engine: derive the visible rows from a result set and filter state."""

from typing import Callable, Dict, List, Optional, Sequence

from tmsearch.filters.models import ALL_STATUS, OWNER_KEY, STATUS_KEY, FacetToggle, FilterState
from tmsearch.parsing.models import DisplayRecord

Predicate = Callable[[DisplayRecord, str, bool], bool]


def _match_status(record: DisplayRecord, category: str, case_sensitive: bool) -> bool:
    """Status categories always compare case-insensitively."""
    return record.status_type.strip().lower() == category.strip().lower()


def _match_owner(record: DisplayRecord, pattern: str, case_sensitive: bool) -> bool:
    """Check if pattern is contained in the owner name."""
    if not pattern:
        return True
    owner = record.current_owner
    if not case_sensitive:
        owner = owner.lower()
        pattern = pattern.lower()
    return pattern in owner


# Filter predicates per column key. Column descriptors never filter.
COLUMN_PREDICATES: Dict[str, Predicate] = {
    STATUS_KEY: _match_status,
    OWNER_KEY: _match_owner,
}


def _matches_all(record: DisplayRecord, active: Dict[str, str], case_sensitive: bool) -> bool:
    for key, value in active.items():
        if not COLUMN_PREDICATES[key](record, value, case_sensitive):
            return False
    return True


def apply_filters(
    results: Sequence[DisplayRecord],
    filters: Optional[FilterState] = None,
    *,
    case_sensitive: bool = False,
) -> List[DisplayRecord]:
    """
    Narrow a result set to the records passing every active filter.

    Filters compose with AND. The input is never modified; a new list is
    returned with the surviving records in their original relative order.

    Args:
        results: Result set (any ordered sequence of records)
        filters: Active filter state; None or empty means unfiltered
        case_sensitive: Whether owner substring matching is case-sensitive

    Returns:
        Visible records
    """
    active = filters.as_mapping() if filters is not None else {}
    if not active:
        return list(results)
    return [record for record in results if _matches_all(record, active, case_sensitive)]


def status_toggles(
    results: Sequence[DisplayRecord],
    filters: FilterState,
    categories: Sequence[str],
) -> List[FacetToggle]:
    """
    Build the status facet controls.

    Counts are taken over the full result set, so a toggle shows how many
    records it would select on its own. 'All' is active when no status
    filter is set.
    """
    selected = filters.status_type
    toggles = []
    for category in categories:
        if category.strip().lower() == ALL_STATUS.lower():
            toggles.append(FacetToggle(label=category, active=selected is None, count=len(results)))
            continue
        count = sum(1 for record in results if _match_status(record, category, False))
        active = selected is not None and selected.strip().lower() == category.strip().lower()
        toggles.append(FacetToggle(label=category, active=active, count=count))
    return toggles


def owner_toggles(
    results: Sequence[DisplayRecord],
    filters: FilterState,
    owners: Sequence[str],
    *,
    case_sensitive: bool = False,
) -> List[FacetToggle]:
    """Build the owner facet checkboxes; a checkbox is active when it is the owner pattern."""
    return [
        FacetToggle(
            label=owner,
            active=filters.current_owner == owner,
            count=sum(1 for record in results if _match_owner(record, owner, case_sensitive)),
        )
        for owner in owners
    ]
