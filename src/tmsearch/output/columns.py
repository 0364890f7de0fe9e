"""Column model for the results table.

This module is renderer-only: it says how each record is shown, never which
records are shown. Filtering lives in filters/engine.py.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from tmsearch.parsing.models import DisplayRecord
from tmsearch.utils.time import format_epoch_date

DESCRIPTION_MAX_LENGTH = 160
ELLIPSIS = "..."
MARK_PLACEHOLDER = "[mark]"

EMPTY_NO_QUERY = "Enter a search query to see results."
EMPTY_NO_RESULTS = "No results found."
EMPTY_ALL_FILTERED = "No results."
LOADING_TEXT = "Loading..."


@dataclass(frozen=True)
class Cell:
    """Rendered content of one table cell."""

    lines: Tuple[str, ...] = ()
    badges: Tuple[str, ...] = ()

    def as_text(self) -> str:
        parts = list(self.lines)
        if self.badges:
            parts.append(" ".join(f"[{badge}]" for badge in self.badges))
        return "\n".join(parts)


@dataclass(frozen=True)
class ColumnDescriptor:
    key: str
    header: str
    render: Callable[[DisplayRecord], Cell] = field(compare=False)


def truncate_description(text: str, max_length: int = DESCRIPTION_MAX_LENGTH) -> str:
    """Cut text to max_length characters, appending '...' only when something was cut."""
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}{ELLIPSIS}"


def render_mark(record: DisplayRecord) -> Cell:
    return Cell(lines=(MARK_PLACEHOLDER,))


def render_details(record: DisplayRecord) -> Cell:
    return Cell(
        lines=(
            record.current_owner,
            record.registration_number,
            format_epoch_date(record.registration_date),
        )
    )


def render_status(record: DisplayRecord) -> Cell:
    return Cell(
        lines=(
            record.status_type,
            f"on {format_epoch_date(record.status_date, lowercase=True)}",
            f"renews {format_epoch_date(record.renewal_date, lowercase=True)}",
        )
    )


def make_class_description_renderer(max_length: int = DESCRIPTION_MAX_LENGTH) -> Callable[[DisplayRecord], Cell]:
    def render_class_description(record: DisplayRecord) -> Cell:
        return Cell(
            lines=(truncate_description(record.description_text, max_length),),
            badges=tuple(f"Class {code}" for code in record.class_codes),
        )

    return render_class_description


def build_columns(description_max_length: int = DESCRIPTION_MAX_LENGTH) -> Tuple[ColumnDescriptor, ...]:
    """Build the ordered column set, with a configurable description cut-off."""
    return (
        ColumnDescriptor(key="mark", header="Main", render=render_mark),
        ColumnDescriptor(key="details", header="Details", render=render_details),
        ColumnDescriptor(key="status", header="Status", render=render_status),
        ColumnDescriptor(
            key="classCodes",
            header="Class/Description",
            render=make_class_description_renderer(description_max_length),
        ),
    )


COLUMNS: Tuple[ColumnDescriptor, ...] = build_columns()


def headers(columns: Sequence[ColumnDescriptor] = COLUMNS) -> List[str]:
    return [column.header for column in columns]


def project_rows(
    visible: Sequence[DisplayRecord],
    columns: Sequence[ColumnDescriptor] = COLUMNS,
) -> List[List[Cell]]:
    """Project each visible record into one cell per column, in column order."""
    return [[column.render(record) for column in columns] for record in visible]


def empty_state_text(query: str, result_count: int, visible_count: int) -> Optional[str]:
    """
    Pick the empty-state message, or None when there are rows to show.

    Distinguishes no query yet, a query with no (or failed) results, and
    results that the active filters hide entirely.
    """
    if visible_count > 0:
        return None
    if not query:
        return EMPTY_NO_QUERY
    if result_count == 0:
        return EMPTY_NO_RESULTS
    return EMPTY_ALL_FILTERED
