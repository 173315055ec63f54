"""
Delimited-text parser for decoded price lists.

The exporters we accept write one record per line, tab separated (or comma
separated for hand-made files), with no quoting. A field may therefore not
contain the delimiter or a newline.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from app.services.encoding import BOM_CHAR, first_non_empty_line

STRAY_PREAMBLE = "{}"


@dataclass(frozen=True)
class RawRow:
    """One data line as ordered (header, cell) pairs, before canonicalization."""

    cells: Tuple[Tuple[str, str], ...]

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.cells)

    def get(self, header: str, default: Optional[str] = None) -> Optional[str]:
        """Cell under an exact header text; later duplicates win."""
        value = default
        for name, cell in self.cells:
            if name == header:
                value = cell
        return value

    def headers(self) -> List[str]:
        return [name for name, _ in self.cells]

    def as_dict(self) -> Dict[str, str]:
        return dict(self.cells)


@dataclass
class ParsedPriceList:
    headers: List[str] = field(default_factory=list)
    rows: List[RawRow] = field(default_factory=list)
    first_line: str = ""


def _strip_bom(text: str) -> str:
    return text.replace(BOM_CHAR, "")


def _content_lines(text: str) -> List[str]:
    """
    Normalize newlines, drop the blank/"{}" preamble and all blank lines.

    Lines are not trimmed: a trailing delimiter on the header line still
    decides the delimiter.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    while lines and not lines[0].strip():
        lines.pop(0)

    if lines and lines[0].strip() == STRAY_PREAMBLE:
        lines.pop(0)
        while lines and not lines[0].strip():
            lines.pop(0)

    cleaned = []
    for line in lines:
        line = _strip_bom(line)
        if line.strip():
            cleaned.append(line)
    return cleaned


def detect_delimiter(header_line: str) -> str:
    """Tab if the header line holds one, else comma."""
    return "\t" if "\t" in header_line else ","


def split_grid(text: str) -> List[List[str]]:
    """Raw grid of cells: header row first, no trimming of cell contents."""
    lines = _content_lines(text)
    if not lines:
        return []
    delimiter = detect_delimiter(lines[0])
    return [line.split(delimiter) for line in lines]


def parse_delimited(text: str) -> ParsedPriceList:
    """
    Parse decoded text into header-keyed rows.

    Fewer than two content lines (a header only, or nothing) gives an empty
    result rather than an error; the caller decides whether that is fatal.
    Rows whose cells are all blank are skipped, missing trailing cells become
    empty strings and cells beyond the header width are ignored.
    """
    result = ParsedPriceList(first_line=first_non_empty_line(text))

    grid = split_grid(text)
    if len(grid) < 2:
        return result

    headers = [_strip_bom(h).strip() for h in grid[0]]
    result.headers = headers

    for cells in grid[1:]:
        if all(not c.strip() for c in cells):
            continue
        pairs = tuple(
            (header, cells[i].strip() if i < len(cells) else "")
            for i, header in enumerate(headers)
        )
        result.rows.append(RawRow(pairs))

    return result
