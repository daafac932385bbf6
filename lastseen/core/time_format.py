from __future__ import annotations

import time
from typing import List, Tuple

DEFAULT_DATE_FORMAT = "%a %b %d %Y %I:%M:%S %p"

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS
WEEK_MS = 7 * DAY_MS
# mean Gregorian month
MONTH_MS = 2_629_743_830
YEAR_MS = 12 * MONTH_MS

_UNITS: Tuple[Tuple[str, int], ...] = (
    ("year", YEAR_MS),
    ("month", MONTH_MS),
    ("week", WEEK_MS),
    ("day", DAY_MS),
    ("hour", HOUR_MS),
    ("minute", MINUTE_MS),
)


def now_millis() -> int:
    return int(time.time() * 1000)


def format_date(millis: int, fmt: str = DEFAULT_DATE_FORMAT) -> str:
    """
    Format epoch millis in local time, e.g. 'Tue Mar 05 2024 09:15:00 PM'.
    Values the platform cannot convert are rendered as raw millis.
    """
    try:
        return time.strftime(fmt, time.localtime(millis / 1000.0))
    except (OverflowError, OSError, ValueError):
        return f"{int(millis)} ms since epoch"


def precise_duration(span_ms: int) -> List[Tuple[int, str]]:
    """
    Split a non-negative span into (count, unit) pairs, largest unit first.
    Anything under a minute is dropped.
    """
    out: List[Tuple[int, str]] = []
    rest = max(0, int(span_ms))
    for unit, size in _UNITS:
        n, rest = divmod(rest, size)
        if n:
            out.append((n, unit))
    return out


def relative_date(millis: int, now_ms: int) -> str:
    """
    Describe millis relative to now_ms in English:
    '3 days 4 hours ago', '10 minutes from now', 'moments ago'.
    """
    delta = int(now_ms) - int(millis)
    future = delta < 0
    parts = precise_duration(abs(delta))
    if not parts:
        return "moments from now" if future else "moments ago"
    text = " ".join(f"{n} {unit}{'' if n == 1 else 's'}" for n, unit in parts)
    return f"{text} from now" if future else f"{text} ago"
