from __future__ import annotations

import time

import pytest

from lastseen.core.time_format import (
    DAY_MS,
    DEFAULT_DATE_FORMAT,
    HOUR_MS,
    MINUTE_MS,
    MONTH_MS,
    WEEK_MS,
    YEAR_MS,
    format_date,
    precise_duration,
    relative_date,
)

NOW = 1_700_000_000_000


def test_format_date_uses_local_time():
    assert format_date(NOW) == time.strftime(DEFAULT_DATE_FORMAT, time.localtime(NOW / 1000.0))
    assert format_date(NOW, "%Y") == time.strftime("%Y", time.localtime(NOW / 1000.0))


def test_precise_duration_largest_unit_first():
    span = 2 * DAY_MS + 3 * HOUR_MS + 4 * MINUTE_MS + 59_000
    assert precise_duration(span) == [(2, "day"), (3, "hour"), (4, "minute")]


def test_precise_duration_long_spans():
    assert precise_duration(YEAR_MS + MONTH_MS + WEEK_MS) == [(1, "year"), (1, "month"), (1, "week")]


@pytest.mark.parametrize(
    "delta,expected",
    [
        (0, "moments ago"),
        (59_000, "moments ago"),
        (MINUTE_MS, "1 minute ago"),
        (2 * HOUR_MS + 5 * MINUTE_MS, "2 hours 5 minutes ago"),
        (3 * DAY_MS, "3 days ago"),
        (2 * WEEK_MS + DAY_MS, "2 weeks 1 day ago"),
    ],
)
def test_relative_date_past(delta, expected):
    assert relative_date(NOW - delta, NOW) == expected


def test_relative_date_future():
    assert relative_date(NOW + 10 * MINUTE_MS, NOW) == "10 minutes from now"
    assert relative_date(NOW + 1000, NOW) == "moments from now"


def test_format_date_falls_back_for_unrepresentable_values():
    assert format_date(10**20) == f"{10**20} ms since epoch"
