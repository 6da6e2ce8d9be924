"""
A1 notation parsing.

Converts references such as ``"B2"`` and ``"A1:C10"`` into zero-based,
end-exclusive grid coordinates, and back.
"""

from dataclasses import dataclass
from typing import Any, Dict, NamedTuple

from sheets_mcp.errors import InvalidCellNotation, InvalidRangeFormat


class CellAddress(NamedTuple):
    column: int
    row: int


@dataclass(frozen=True)
class GridRange:
    """Rectangle on one sheet. Row and column ends are exclusive."""

    sheet_id: int
    start_row: int
    end_row: int
    start_column: int
    end_column: int

    def to_dict(self) -> Dict[str, int]:
        """Sheets API GridRange representation."""
        return {
            'sheetId': self.sheet_id,
            'startRowIndex': self.start_row,
            'endRowIndex': self.end_row,
            'startColumnIndex': self.start_column,
            'endColumnIndex': self.end_column,
        }


def column_to_index(letters: str) -> int:
    """Convert column letters to a 0-based index ('A'=0, 'Z'=25, 'AA'=26)."""
    result = 0
    for char in letters:
        result = result * 26 + (ord(char) - ord('A') + 1)
    return result - 1


def column_index_to_letter(index: int) -> str:
    """Convert 0-based column index to A1 notation letter (0='A', 25='Z', 26='AA', etc.)"""
    result = ""
    while index >= 0:
        result = chr(index % 26 + ord('A')) + result
        index = index // 26 - 1
    return result


def parse_cell(cell: str) -> CellAddress:
    """Parse a single reference like 'C7' into a zero-based CellAddress."""
    position = 0
    while position < len(cell) and 'A' <= cell[position] <= 'Z':
        position += 1

    letters, digits = cell[:position], cell[position:]
    if not letters:
        raise InvalidCellNotation(cell, "missing column letters")
    if not digits:
        raise InvalidCellNotation(cell, "missing row number")
    if not all('0' <= char <= '9' for char in digits):
        raise InvalidCellNotation(cell, "row must be a decimal number")
    if int(digits) == 0:
        raise InvalidCellNotation(cell, "row numbers start at 1")

    return CellAddress(column=column_to_index(letters), row=int(digits) - 1)


def parse_range(sheet_id: int, range_string: str) -> GridRange:
    """
    Parse an 'A1:B2' range into a GridRange on ``sheet_id``.

    Single-cell ranges still need both halves ('B2:B2').
    """
    parts = range_string.split(':')
    if len(parts) != 2:
        raise InvalidRangeFormat(range_string)

    start = parse_cell(parts[0])
    end = parse_cell(parts[1])

    return GridRange(
        sheet_id=sheet_id,
        start_row=start.row,
        end_row=end.row + 1,
        start_column=start.column,
        end_column=end.column + 1,
    )


def grid_range_to_a1(grid_range: Dict[str, Any], sheet_title: str) -> str:
    """Convert a GridRange dict to A1 notation like 'Sheet1!A1:C10'."""
    start_col = grid_range.get('startColumnIndex', 0)
    end_col = grid_range.get('endColumnIndex')
    start_row = grid_range.get('startRowIndex', 0)
    end_row = grid_range.get('endRowIndex')

    start = f"{column_index_to_letter(start_col)}{start_row + 1}"
    if end_col is not None and end_row is not None:
        end = f"{column_index_to_letter(end_col - 1)}{end_row}"
        return f"{sheet_title}!{start}:{end}"
    return f"{sheet_title}!{start}"
