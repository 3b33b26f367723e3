# timesheet_api/blueprints/periods.py
from flask import Blueprint, request, current_app

from timesheet_api.common.auth import requires_employee
from timesheet_api.common.errors import ValidationError
from timesheet_api.common.http import ok
from timesheet_api.services.period_store import set_closed
from timesheet_api.services.weeks import is_date_iso, is_week_key, iso_week_key

bp = Blueprint("periods", __name__, url_prefix="/api/v1/periods")

ACTIONS = ("close", "reopen")


def _week_key_from(j: dict):
    period = j.get("period") if isinstance(j.get("period"), dict) else {}
    key = j.get("week_key") or period.get("week_key") or period.get("weekKey")
    if key:
        return key
    start = j.get("week_start_date") or period.get("week_start_date") or period.get("weekStartDate")
    if is_date_iso(start):
        try:
            return iso_week_key(start)
        except ValueError:
            return None
    return None


@bp.patch("")
@requires_employee
def patch_period(emp):
    """
    PATCH /api/v1/periods
    {"week_key": "2024-W01", "action": "close" | "reopen"}
    """
    j = request.get_json(silent=True) or {}
    action = j.get("action")
    if action not in ACTIONS:
        raise ValidationError("Invalid action. Use 'close' or 'reopen'.", payload={"field": "action"})

    week_key = _week_key_from(j)
    if not is_week_key(week_key):
        raise ValidationError("week_key must look like YYYY-Www", payload={"field": "week_key"})

    p = set_closed(
        emp.id,
        week_key,
        closed=(action == "close"),
        enforce_expected=bool(current_app.config.get("ENFORCE_EXPECTED_HOURS_ON_CLOSE")),
        settings_id=emp.settings_id,
    )
    return ok(p.to_dict())
