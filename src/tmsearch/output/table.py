"""Result table rendering (plain text, markdown and JSON).

This module is renderer-only. All query/filter logic lives in api/store.py
and filters/engine.py; renderers only format a SearchView.
"""

import json
from typing import List

from tmsearch.api.store import SearchView
from tmsearch.output.columns import LOADING_TEXT, Cell
from tmsearch.parsing.normalizer import record_to_dict


def _summary_line(view: SearchView) -> str:
    return f'About {view.result_count} Trademarks found for "{view.query}"'


def _suggestion_line(view: SearchView) -> str:
    labels = "  ".join(f"[{s.label}]" for s in view.suggestions)
    return f"Also try searching for {labels}"


def _facet_lines(view: SearchView) -> List[str]:
    status = " ".join(
        f"{'*' if t.active else ' '}{t.label}({t.count})" for t in view.status_toggles
    )
    owners = " ".join(
        f"[{'x' if t.active else ' '}] {t.label}({t.count})" for t in view.owner_toggles
    )
    owner_pattern = view.filters.get("currentOwner", "")
    lines = [f"Status: {status}"]
    if owners:
        lines.append(f"Owners: {owners}")
    lines.append(f"Owner search: {owner_pattern!r}")
    lines.append(f"Display: {view.display_mode}")
    return lines


def _cell_text(cell: Cell) -> str:
    return " | ".join(line for line in cell.as_text().split("\n") if line)


def _render_list(view: SearchView) -> List[str]:
    widths = [len(header) for header in view.headers]
    text_rows = [[_cell_text(cell) for cell in row] for row in view.rows]
    for row in text_rows:
        for index, value in enumerate(row):
            widths[index] = max(widths[index], len(value))

    def _format(values: List[str]) -> str:
        return "  ".join(value.ljust(widths[index]) for index, value in enumerate(values)).rstrip()

    lines = [_format(view.headers), "-" * (sum(widths) + 2 * (len(widths) - 1))]
    lines.extend(_format(row) for row in text_rows)
    return lines


def _render_grid(view: SearchView) -> List[str]:
    lines = []
    for position, row in enumerate(view.rows, 1):
        lines.append(f"#{position}")
        for header, cell in zip(view.headers, row):
            lines.append(f"  {header}: {_cell_text(cell)}")
        lines.append("")
    return lines


def render_text(view: SearchView) -> str:
    """Render the search page as plain text (table or cards, per display mode)."""
    lines = [_summary_line(view)]
    if view.suggestions:
        lines.append(_suggestion_line(view))
    lines.append("")

    if view.loading:
        lines.append(LOADING_TEXT)
        return "\n".join(lines)

    lines.extend(_facet_lines(view))
    lines.append("")

    if view.empty_state:
        lines.append(view.empty_state)
        if view.error:
            lines.append(f"(error: {view.error})")
        return "\n".join(lines)

    if view.display_mode == "grid":
        lines.extend(_render_grid(view))
    else:
        lines.extend(_render_list(view))
    return "\n".join(lines)


def _md_escape(text: str) -> str:
    return text.replace("|", "\\|")


def render_markdown(view: SearchView) -> str:
    """Render the search page as a markdown document."""
    lines = [f"# {_summary_line(view)}", ""]

    if view.suggestions:
        lines.append(_suggestion_line(view))
        lines.append("")

    if view.loading:
        lines.append(LOADING_TEXT)
        return "\n".join(lines)

    if view.filters:
        active = ", ".join(f"{key}={value}" for key, value in view.filters.items())
        lines.append(f"- **Filters:** {active}")
        lines.append("")

    if view.empty_state:
        lines.append(view.empty_state)
        lines.append("")
        return "\n".join(lines)

    lines.append("| " + " | ".join(view.headers) + " |")
    lines.append("|" + "|".join(" --- " for _ in view.headers) + "|")
    for row in view.rows:
        cells = [_md_escape(cell.as_text()).replace("\n", "<br>") for cell in row]
        lines.append("| " + " | ".join(cells) + " |")
    lines.append("")
    return "\n".join(lines)


def render_json(view: SearchView) -> str:
    """Render the visible records and page state as JSON."""
    data = {
        "query": view.query,
        "loading": view.loading,
        "error": view.error,
        "error_kind": view.error_kind,
        "result_count": view.result_count,
        "total_hits": view.total_hits,
        "filters": view.filters,
        "display_mode": view.display_mode,
        "empty_state": view.empty_state,
        "status_toggles": [t.model_dump() for t in view.status_toggles],
        "owner_toggles": [t.model_dump() for t in view.owner_toggles],
        "suggestions": [s.model_dump() for s in view.suggestions],
        "records": [record_to_dict(record) for record in view.visible],
    }
    return json.dumps(data, indent=2, sort_keys=True)
