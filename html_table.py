"""Reads the provider's HTML table strings into a plain row/cell grid.

Only the first top-level <table> is read. Rows of nested tables are ignored;
their text still counts towards the enclosing cell.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Dict, List, Optional

_LEADING_INT = re.compile(r"^\s*[+]?(\d+)")

# same caps browsers apply to the attributes
MAX_COLSPAN = 1000
MAX_ROWSPAN = 65534


@dataclass(frozen=True)
class TableCell:
    text: str
    header: bool = False
    colspan: int = 1
    rowspan: int = 1


def parse_span(value: Optional[str], limit: int = MAX_COLSPAN) -> int:
    """colspan/rowspan attribute -> int in [1, limit]; missing or non-numeric means 1."""
    if value is None:
        return 1
    m = _LEADING_INT.match(value)
    if not m:
        return 1
    return min(limit, max(1, int(m.group(1))))


class _TableReader(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.rows: List[List[TableCell]] = []
        self._depth = 0          # <table> nesting level
        self._done = False       # first top-level table closed
        self._row: Optional[List[TableCell]] = None
        self._cell: Optional[Dict[str, object]] = None

    def handle_starttag(self, tag: str, attrs) -> None:
        if self._done:
            return
        if tag == "table":
            self._depth += 1
            return
        if self._depth != 1:
            return
        if tag == "tr":
            self._close_row()
            self._row = []
        elif tag in ("td", "th"):
            self._close_cell()
            if self._row is None:
                self._row = []
            a = dict(attrs)
            self._cell = {
                "header": tag == "th",
                "colspan": parse_span(a.get("colspan"), MAX_COLSPAN),
                "rowspan": parse_span(a.get("rowspan"), MAX_ROWSPAN),
                "text": [],
            }
        elif tag == "br" and self._cell is not None:
            self._cell["text"].append(" ")

    def handle_endtag(self, tag: str) -> None:
        if self._done:
            return
        if tag == "table":
            if self._depth == 1:
                self._close_row()
                self._done = True
            self._depth = max(0, self._depth - 1)
            return
        if self._depth != 1:
            return
        if tag in ("td", "th"):
            self._close_cell()
        elif tag == "tr":
            self._close_row()

    def handle_data(self, data: str) -> None:
        if self._cell is not None and not self._done:
            self._cell["text"].append(data)

    def _close_cell(self) -> None:
        if self._cell is None:
            return
        text = " ".join("".join(self._cell["text"]).split())
        self._row.append(TableCell(
            text=text,
            header=bool(self._cell["header"]),
            colspan=int(self._cell["colspan"]),
            rowspan=int(self._cell["rowspan"]),
        ))
        self._cell = None

    def _close_row(self) -> None:
        self._close_cell()
        if self._row:
            self.rows.append(self._row)
        self._row = None


def parse_table(html: str) -> List[List[TableCell]]:
    """Rows of cells of the first table in `html`; [] when there is no table or no rows."""
    if not html or not html.strip():
        return []
    reader = _TableReader()
    reader.feed(html)
    reader.close()
    reader._close_row()
    return reader.rows


def place_cells(rows: List[List[TableCell]]) -> List[tuple]:
    """
    Lays cells out the way a browser does: each cell takes the next free column
    in its row, skipping slots already covered by rowspans from above.
    Rowspans running past the last row are clipped.
    Returns (row, col, rowspan, colspan, cell) tuples.
    """
    taken = set()
    out = []
    n_rows = len(rows)
    for r, row in enumerate(rows):
        col = 0
        for cell in row:
            while (r, col) in taken:
                col += 1
            rowspan = min(cell.rowspan, n_rows - r)
            out.append((r, col, rowspan, cell.colspan, cell))
            for dr in range(rowspan):
                for dc in range(cell.colspan):
                    taken.add((r + dr, col + dc))
            col += cell.colspan
    return out


def grid_size(rows: List[List[TableCell]]) -> tuple:
    """(n_rows, n_cols) of the rectangle the spanned cells occupy."""
    placements = place_cells(rows)
    if not placements:
        return 0, 0
    return len(rows), max(col + colspan for _, col, _, colspan, _ in placements)


__all__ = ["TableCell", "parse_table", "parse_span", "place_cells", "grid_size", "MAX_COLSPAN", "MAX_ROWSPAN"]
