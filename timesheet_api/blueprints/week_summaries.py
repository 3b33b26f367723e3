from flask import Blueprint, request, current_app

from timesheet_api.common.auth import requires_employee
from timesheet_api.common.http import ok
from timesheet_api.services.week_summaries import get_week_summaries

bp = Blueprint("week_summaries", __name__, url_prefix="/api/v1/week-summaries")


@bp.get("")
@requires_employee
def week_summaries(emp):
    """GET /api/v1/week-summaries?from=2024-01-01&to=2024-01-31"""
    data = get_week_summaries(
        emp.id,
        request.args.get("from"),
        request.args.get("to"),
        max_weeks=int(current_app.config.get("SUMMARY_MAX_WEEKS", 60)),
    )
    return ok(data["summaries"], **{"range": data["range"]})
