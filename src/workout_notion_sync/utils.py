"""Utility functions."""
import re
from datetime import date
from typing import Optional, Tuple

CELL_REFERENCE_PATTERN = re.compile(r'^([A-Za-z]+)(\d+)$')


def column_index(letters: str) -> int:
    """Convert spreadsheet column letters to a zero-based index ('A' -> 0, 'AA' -> 26)."""
    result = 0
    for ch in letters.upper():
        result = result * 26 + (ord(ch) - ord('A') + 1)
    return result - 1


def cell_reference_to_indices(cell_reference: str) -> Tuple[int, int]:
    """
    Convert an A1-style cell reference to zero-based (row, column).

    'B2' -> (1, 1), 'AA10' -> (9, 26)

    Raises:
        ValueError: If the reference is not letters followed by digits.
    """
    match = CELL_REFERENCE_PATTERN.match(cell_reference.strip())
    if not match:
        raise ValueError(f"Invalid cell reference: {cell_reference!r}")
    letters, digits = match.groups()
    return int(digits) - 1, column_index(letters)


def format_day_title(day: date) -> str:
    """Day page title in M/D/YYYY form, no zero padding."""
    return f"{day.month}/{day.day}/{day.year}"


def format_week_title(sheet_title: str, day: date, week: Optional[int] = None) -> str:
    """Week page title: '<sheet title> - YYYY-MM-DD', prefixed with the week number when known."""
    title = f"{sheet_title} - {day.isoformat()}"
    if week:
        return f"Week {week}: {title}"
    return title
