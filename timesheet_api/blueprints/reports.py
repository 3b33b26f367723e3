# timesheet_api/blueprints/reports.py
from flask import Blueprint, request

from timesheet_api.common.auth import requires_admin
from timesheet_api.common.errors import ValidationError
from timesheet_api.common.http import ok
from timesheet_api.services.reports import report_by_dates, report_missing_periods

bp = Blueprint("reports", __name__, url_prefix="/api/v1/reports")


def _bool_param(name: str, default: bool) -> bool:
    raw = str(request.args.get(name, str(int(default)))).lower()
    return raw in ("1", "true", "yes")


@bp.get("/by-dates")
@requires_admin
def by_dates(_uid):
    """GET /api/v1/reports/by-dates?from=&to=&employee_id=<id|all>"""
    raw = request.args.get("employee_id") or request.args.get("employeeId")
    emp_id = None
    if raw and raw != "all":
        try:
            emp_id = int(raw)
        except ValueError:
            raise ValidationError("Invalid employee_id", payload={"field": "employee_id"})
        if emp_id <= 0:
            raise ValidationError("Invalid employee_id", payload={"field": "employee_id"})

    rows = report_by_dates(request.args.get("from"), request.args.get("to"), employee_id=emp_id)
    return ok(rows, count=len(rows))


@bp.get("/missing-periods")
@requires_admin
def missing_periods(_uid):
    """GET /api/v1/reports/missing-periods?before=YYYY-MM-DD&only_active=1"""
    data = report_missing_periods(request.args.get("before"), only_active=_bool_param("only_active", False))
    return ok(data)
