# timesheet_api/blueprints/entries.py
from flask import Blueprint, request

from timesheet_api.common.auth import requires_employee
from timesheet_api.common.http import ok
from timesheet_api.services.day_entries import replace_day_entries
from timesheet_api.services.period_view import get_period_view

bp = Blueprint("entries", __name__, url_prefix="/api/v1/entries")


@bp.get("")
@requires_employee
def get_entries(emp):
    """
    GET /api/v1/entries?from=2024-01-01&to=2024-01-07

    Returns the week's period (created open if missing), entries grouped by
    date, per-date totals ("type" is "mixed" when a date has several types)
    and the expectation snapshots stored for the range.
    """
    data = get_period_view(emp.id, request.args.get("from"), request.args.get("to"))
    return ok(data)


@bp.put("")
@requires_employee
def put_entries(emp):
    """
    PUT /api/v1/entries
    {
      "entries": {
        "2024-01-01": [{"type": "work", "hours": 6, "project_id": 3}, {"type": "sick", "hours": 2}],
        "2024-01-02": []
      }
    }
    Every listed date is replaced as a whole; an empty list clears the date.
    409 PERIOD_CLOSED when the week is closed.
    """
    j = request.get_json(silent=True) or {}
    period = replace_day_entries(emp.id, emp.settings_id, j.get("entries"), employee=emp)
    return ok({"period": period.to_dict()})
