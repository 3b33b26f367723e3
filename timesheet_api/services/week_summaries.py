# timesheet_api/services/week_summaries.py
from __future__ import annotations

from collections import defaultdict
from typing import List

from timesheet_api.models.day_entry import DayEntry
from timesheet_api.models.period import Period
from timesheet_api.services.period_view import parse_range
from timesheet_api.services.weeks import monday_of, mondays_between, sunday_of

DEFAULT_MAX_WEEKS = 60


def get_week_summaries(employee_id: int, from_iso, to_iso, max_weeks: int = DEFAULT_MAX_WEEKS) -> dict:
    """
    Per-week coverage for calendar badges.

    The range is widened to whole weeks. For each Monday in it:
      days_with_entries -> distinct dates whose hours add up to more than 0
      closed            -> the week's Period is closed (False when none exists)
    """
    start, end = parse_range(from_iso, to_iso)
    span_start, span_end = monday_of(start), sunday_of(end)

    rows = (
        DayEntry.query
        .with_entities(DayEntry.work_date, DayEntry.hours)
        .filter(
            DayEntry.employee_id == employee_id,
            DayEntry.work_date >= span_start,
            DayEntry.work_date <= span_end,
        )
        .all()
    )
    hours_by_date = defaultdict(float)
    for work_date, hours in rows:
        hours_by_date[work_date] += float(hours or 0)

    covered = defaultdict(set)
    for d, h in hours_by_date.items():
        if h > 0:
            covered[monday_of(d)].add(d)

    mondays = mondays_between(span_start, span_end, limit=max_weeks)
    closed_by_monday = {}
    if mondays:
        # the range reported back ends where the max_weeks cap stopped
        span_end = sunday_of(mondays[-1])
        for week_start, closed in (
            Period.query
            .with_entities(Period.week_start_date, Period.closed)
            .filter(Period.employee_id == employee_id, Period.week_start_date.in_(mondays))
            .all()
        ):
            closed_by_monday[week_start] = bool(closed)

    summaries: List[dict] = [
        {
            "monday": m.isoformat(),
            "days_with_entries": len(covered.get(m, ())),
            "closed": closed_by_monday.get(m, False),
        }
        for m in mondays
    ]
    return {"summaries": summaries, "range": {"from": span_start.isoformat(), "to": span_end.isoformat()}}
