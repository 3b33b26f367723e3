from datetime import date

from timesheet_api.extensions import db
from timesheet_api.models.settings import Settings
from timesheet_api.services.expectations import (
    expected_week, find_settings_row, resolve_expected_hours, resolve_schedule,
)


def _settings(mon=8, sat=0, is_default=False):
    s = Settings(name="S", mon_hours=mon, tue_hours=8, wed_hours=8, thu_hours=8,
                 fri_hours=8, sat_hours=sat, sun_hours=0, is_default=is_default)
    db.session.add(s); db.session.commit()
    return s


def test_fallback_when_nothing_configured(ctx):
    assert find_settings_row(None) is None
    assert resolve_expected_hours(None, "2024-01-01") == 8
    assert resolve_expected_hours(None, "2024-01-06") == 0
    assert resolve_schedule(None) == (8.0, 8.0, 8.0, 8.0, 8.0, 0.0, 0.0)


def test_default_row_applies_without_explicit_reference(ctx):
    _settings(mon=6, is_default=True)
    assert resolve_expected_hours(None, "2024-01-01") == 6


def test_explicit_reference_wins_over_default(ctx):
    _settings(mon=6, is_default=True)
    own = _settings(mon=4, sat=2)
    assert resolve_expected_hours(own.id, "2024-01-01") == 4
    assert resolve_expected_hours(own.id, date(2024, 1, 6)) == 2


def test_missing_explicit_reference_falls_back_to_default(ctx):
    d = _settings(mon=7, is_default=True)
    assert find_settings_row(9999).id == d.id
    assert resolve_expected_hours(9999, "2024-01-01") == 7


def test_expected_week_is_monday_first(ctx):
    own = _settings(mon=5, sat=3)
    assert expected_week(own.id, "2024-01-03") == [5.0, 8.0, 8.0, 8.0, 8.0, 3.0, 0.0]
