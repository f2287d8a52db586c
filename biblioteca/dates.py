"""Dates in DD/MM/AAAA form: validation, ordering and the current day."""

from __future__ import annotations

import re
from datetime import date

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_DATE_FIELDS = re.compile(r"\s*([+-]?\d+)/\s*([+-]?\d+)/\s*([+-]?\d+)")
_THIRTY_DAY_MONTHS = frozenset({4, 6, 9, 11})


def _atoi(text: str) -> int:
    """Leading integer of text, or 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def is_valid_date(text: str) -> bool:
    """True when text is a DD/MM/AAAA date that exists, with 1900 <= year <= 2100."""
    fields = [field for field in text.split("/") if field]
    if len(fields) < 3:
        return False
    day, month, year = (_atoi(field) for field in fields[:3])
    if not 1900 <= year <= 2100:
        return False
    if not 1 <= month <= 12:
        return False
    if day < 1:
        return False
    if month == 2:
        return day <= (29 if _is_leap(year) else 28)
    if month in _THIRTY_DAY_MONTHS:
        return day <= 30
    return day <= 31


def _parse(text: str) -> tuple[int, int, int]:
    match = _DATE_FIELDS.match(text)
    if not match:
        raise ValueError(f"data inválida: {text!r}")
    day, month, year = (int(group) for group in match.groups())
    return year, month, day


def compare_dates(first: str, second: str) -> int:
    """Return -1, 0 or 1 as first is before, equal to or after second.

    Raises ValueError when either date cannot be read as D/M/Y numbers.
    """
    a = _parse(first)
    b = _parse(second)
    return (a > b) - (a < b)


def valid_interval(loan_date: str, return_date: str) -> bool:
    """True when there is no return date or it is not before the loan date."""
    if not return_date:
        return True
    try:
        return compare_dates(loan_date, return_date) <= 0
    except ValueError:
        return False


def today() -> str:
    """The current local date as DD/MM/AAAA."""
    return date.today().strftime("%d/%m/%Y")