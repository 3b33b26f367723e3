# timesheet_api/services/weeks.py
"""
Week arithmetic shared by every timesheet component.

Weeks start on Monday; week keys follow ISO-8601 (`YYYY-Www`, week 1 is the
week holding the year's first Thursday). Nothing else in the package should
compute Mondays or week numbers on its own.
"""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import List

_DATE_ISO_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_WEEK_KEY_RE = re.compile(r"\d{4}-W\d{2}")

ONE_DAY = timedelta(days=1)


def is_date_iso(s) -> bool:
    """Strict `YYYY-MM-DD` shape check. Calendar validity is not checked here."""
    return isinstance(s, str) and _DATE_ISO_RE.fullmatch(s) is not None


def is_week_key(s) -> bool:
    return isinstance(s, str) and _WEEK_KEY_RE.fullmatch(s) is not None


def parse_iso(s) -> date:
    """
    `YYYY-MM-DD` -> date. Raises ValueError on a bad shape or an impossible
    calendar date (e.g. 2024-02-30).
    """
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s
    if not is_date_iso(s):
        raise ValueError(f"Invalid date: {s!r}")
    return date.fromisoformat(s)


def to_iso(d: date) -> str:
    return d.isoformat()


def monday_of(d) -> date:
    d = parse_iso(d)
    return d - timedelta(days=d.weekday())


def sunday_of(d) -> date:
    return monday_of(d) + timedelta(days=6)


def iso_week_key(monday) -> str:
    year, week, _ = parse_iso(monday).isocalendar()
    return f"{year}-W{week:02d}"


def add_days(date_iso: str, n: int) -> str:
    return to_iso(parse_iso(date_iso) + timedelta(days=n))


def week_dates(monday) -> List[date]:
    start = monday_of(monday)
    return [start + timedelta(days=i) for i in range(7)]


def same_week(a, b) -> bool:
    return monday_of(a) == monday_of(b)


def mondays_between(start, end, limit: int = 60) -> List[date]:
    """Every Monday from the week of `start` through the week of `end`, capped at `limit`."""
    cursor = monday_of(start)
    stop = parse_iso(end)
    out: List[date] = []
    while cursor <= stop and len(out) < limit:
        out.append(cursor)
        cursor += timedelta(days=7)
    return out


def iter_days(start, end):
    cur, stop = parse_iso(start), parse_iso(end)
    while cur <= stop:
        yield cur
        cur += ONE_DAY
