"""
Claim search text interpretation.

A query is tried, in order, as:
    1. a day    D.M.Y | D-M-Y | D/M/Y | D M Y | Y-M-D (1-2 digit day/month)
    2. a month  M.Y | M-Y | M/Y | M Y | Y.M | Y-M | Y/M | Y M
    3. free text matched against claim descriptions

Numbers outside the calendar (month 13, 31.2.) do not match a stage and
fall through to the next one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from agency.core.constants import ClaimQueryKind

_SEPARATORS = re.compile(r"[.\s/]+")
_DAY_FIRST = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
_YEAR_FIRST = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_MONTH_YEAR = re.compile(r"^(\d{1,2})[.\-/ ](\d{4})$")
_YEAR_MONTH = re.compile(r"^(\d{4})[.\-/ ](\d{1,2})$")


@dataclass(frozen=True)
class ClaimQuery:
    """Parsed search: `start`/`end` for DAY and MONTH, `text` for TEXT."""

    kind: ClaimQueryKind
    start: date | None = None
    end: date | None = None
    text: str | None = None


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_day(value: str) -> date | None:
    normalized = _SEPARATORS.sub("-", value.strip())
    match = _DAY_FIRST.match(normalized)
    if match:
        day, month, year = (int(g) for g in match.groups())
        return _safe_date(year, month, day)
    match = _YEAR_FIRST.match(normalized)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _safe_date(year, month, day)
    return None


def parse_month(value: str) -> date | None:
    """First day of the month named by `value`, or None."""
    text = value.strip()
    match = _MONTH_YEAR.match(text)
    if match:
        month, year = int(match.group(1)), int(match.group(2))
    else:
        match = _YEAR_MONTH.match(text)
        if not match:
            return None
        year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return _safe_date(year, month, 1)


def next_month(first: date) -> date:
    if first.month == 12:
        return date(first.year + 1, 1, 1)
    return date(first.year, first.month + 1, 1)


def parse_query(q: str | None) -> ClaimQuery:
    if q is None or not q.strip():
        return ClaimQuery(kind=ClaimQueryKind.ALL)

    text = q.strip()
    day = parse_day(text)
    if day is not None:
        return ClaimQuery(kind=ClaimQueryKind.DAY, start=day, end=day)

    first = parse_month(text)
    if first is not None:
        return ClaimQuery(kind=ClaimQueryKind.MONTH, start=first, end=next_month(first))

    return ClaimQuery(kind=ClaimQueryKind.TEXT, text=text)
