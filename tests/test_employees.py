from datetime import date

import pytest

from timesheet_api.common.errors import ConflictError, NotFoundError, ValidationError
from timesheet_api.extensions import db
from timesheet_api.models.day_entry import DayEntry
from timesheet_api.models.employee import Employee
from timesheet_api.models.period import Period
from timesheet_api.services.day_entries import replace_day_entries
from timesheet_api.services.employees import create_employee, delete_employees, update_employee


def test_create_and_duplicate_user(ctx):
    e = create_employee({"name": "Ana", "surname": "Horvat", "user_id": "u-1", "start_date": "2024-01-01"})
    assert e.id
    assert e.start_date == date(2024, 1, 1)

    with pytest.raises(ConflictError) as exc:
        create_employee({"name": "Ana", "surname": "Other", "user_id": "u-1"})
    assert exc.value.code == "DUPLICATE_USER"


@pytest.mark.parametrize("body", [
    {"surname": "Horvat", "user_id": "u-2"},
    {"name": "Ana", "surname": " ", "user_id": "u-2"},
    {"name": "Ana", "surname": "Horvat", "user_id": "u-2", "start_date": "2024-02-30"},
    {"name": "Ana", "surname": "Horvat", "user_id": "u-2", "start_date": "2024-03-01", "end_date": "2024-02-01"},
    {"name": "Ana", "surname": "Horvat", "user_id": "u-2", "settings_id": 77},
])
def test_create_validates(ctx, body):
    with pytest.raises(ValidationError):
        create_employee(body)


def test_update_is_partial(ctx):
    e = create_employee({"name": "Ana", "surname": "Horvat", "user_id": "u-1"})
    e = update_employee(e.id, {"end_date": "2024-12-31"})
    assert e.name == "Ana"
    assert e.end_date == date(2024, 12, 31)

    with pytest.raises(ValidationError):
        update_employee(e.id, {"start_date": "2025-01-01"})
    db.session.expire_all()
    assert db.session.get(Employee, e.id).start_date is None

    with pytest.raises(NotFoundError):
        update_employee(999, {"name": "X"})


def test_delete_takes_entries_and_periods_along(ctx):
    e = create_employee({"name": "Ana", "surname": "Horvat", "user_id": "u-1"})
    replace_day_entries(e.id, None, {"2024-01-01": [{"type": "work", "hours": 8}]})

    assert delete_employees([e.id]) == 1
    assert DayEntry.query.count() == 0
    assert Period.query.count() == 0


def test_delete_refuses_own_record(ctx):
    e = create_employee({"name": "Ana", "surname": "Horvat", "user_id": "admin-1"})
    with pytest.raises(ValidationError):
        delete_employees([e.id], caller_user_id="admin-1")
    with pytest.raises(ValidationError):
        delete_employees(["1"])
