"""Date parsing and timestamp formatting utilities."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Final, Mapping


MONTHS: Final[Mapping[str, str]] = {
    "Jan": "01",
    "Feb": "02",
    "Mar": "03",
    "Apr": "04",
    "May": "05",
    "Jun": "06",
    "Jul": "07",
    "Aug": "08",
    "Sep": "09",
    "Oct": "10",
    "Nov": "11",
    "Dec": "12",
}

# e.g. "15Jun2021"
DAY_MONTH_YEAR_RE: Final[re.Pattern[str]] = re.compile(r"([0-9]{2})([A-Za-z]{3})([0-9]{4})")


def parse_day_month_year(
    text: str,
    pattern: re.Pattern[str] = DAY_MONTH_YEAR_RE,
    months: Mapping[str, str] = MONTHS,
) -> str | None:
    """Find a "DDMmmYYYY" token and return it as "YYYY-MM-DD".

    Only the first token in ``text`` is considered. Month lookup is
    case-sensitive ("Jun" matches, "JUN" does not).

    Args:
        text: Free text, e.g. a Placemark description.
        pattern: Regex with day, month-abbreviation and year groups.
        months: Month abbreviation -> zero-padded month number.

    Returns:
        ISO date string, or None if there is no token or the month is unknown.
    """

    if not text:
        return None
    m = pattern.search(text)
    if m is None:
        return None
    day, month, year = m.group(1), m.group(2), m.group(3)
    month_num = months.get(month)
    if month_num is None:
        return None
    return f"{year}-{month_num}-{day}"


def year_of(iso_date: str | None) -> int | None:
    """Year component of a "YYYY-MM-DD" string."""

    if iso_date is None:
        return None
    return int(iso_date[:4])


def utc_timestamp(now: datetime | None = None) -> str:
    """Format a generation timestamp as ISO-8601 UTC with milliseconds, e.g. 2024-05-01T08:30:00.000Z.

    Args:
        now: Timestamp to format. Naive values are treated as UTC. Defaults to current time.
    """

    dt = now if now is not None else datetime.now(UTC)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    dt = dt.astimezone(UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
