# timesheet_api/services/expectations.py
from __future__ import annotations

from typing import List, Tuple

from timesheet_api.models.settings import Settings, FALLBACK_HOURS
from timesheet_api.services.weeks import parse_iso, week_dates


def find_settings_row(settings_id: int | None) -> Settings | None:
    """
    1) explicit reference (employee.settings_id)
    2) the default-flagged row
    """
    if settings_id:
        row = Settings.query.filter_by(id=settings_id).first()
        if row:
            return row
    return Settings.query.filter(Settings.is_default.is_(True)).order_by(Settings.id.desc()).first()


def resolve_schedule(settings_id: int | None) -> Tuple[float, ...]:
    """Expected hours Mon..Sun for a settings reference, falling back to 8/8/8/8/8/0/0."""
    row = find_settings_row(settings_id)
    if row is None:
        return tuple(float(h) for h in FALLBACK_HOURS)
    return row.hours_by_weekday()


def resolve_expected_hours(settings_id: int | None, day) -> float:
    return resolve_schedule(settings_id)[parse_iso(day).weekday()]


def expected_week(settings_id: int | None, monday) -> List[float]:
    schedule = resolve_schedule(settings_id)
    return [schedule[d.weekday()] for d in week_dates(monday)]
