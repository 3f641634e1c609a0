"""Claim search text interpretation (pure parsing, no database)."""

from __future__ import annotations

from datetime import date

import pytest

from agency.core.constants import ClaimQueryKind
from agency.services.claim_search import next_month, parse_day, parse_month, parse_query


@pytest.mark.parametrize(
    "text",
    ["15.3.2024", "15-03-2024", "15/3/2024", "15 3 2024", "2024-03-15", "2024-3-15", " 15. 3. 2024 "],
)
def test_day_formats(text):
    assert parse_day(text) == date(2024, 3, 15)


@pytest.mark.parametrize("text", ["3/2024", "03.2024", "3-2024", "3 2024", "2024-03", "2024.3", "2024/03", "2024 3"])
def test_month_formats(text):
    assert parse_month(text) == date(2024, 3, 1)


def test_invalid_calendar_values_do_not_parse():
    assert parse_day("31.2.2024") is None
    assert parse_month("13/2024") is None
    assert parse_month("2024-00") is None


def test_query_day():
    query = parse_query("15.3.2024")

    assert query.kind is ClaimQueryKind.DAY
    assert query.start == query.end == date(2024, 3, 15)


def test_query_month_is_half_open_range():
    query = parse_query("2024-03")

    assert query.kind is ClaimQueryKind.MONTH
    assert (query.start, query.end) == (date(2024, 3, 1), date(2024, 4, 1))


def test_december_rolls_into_next_year():
    assert next_month(date(2024, 12, 1)) == date(2025, 1, 1)
    assert parse_query("12/2024").end == date(2025, 1, 1)


def test_out_of_range_month_falls_through_to_text():
    query = parse_query("13/2024")

    assert query.kind is ClaimQueryKind.TEXT
    assert query.text == "13/2024"


@pytest.mark.parametrize("text", [None, "", "   "])
def test_blank_means_all(text):
    assert parse_query(text).kind is ClaimQueryKind.ALL


def test_free_text_is_trimmed():
    query = parse_query("  crash ")

    assert query.kind is ClaimQueryKind.TEXT
    assert query.text == "crash"
