# timesheet_api/blueprints/ai.py
from flask import Blueprint, request, current_app

from timesheet_api.common.auth import requires_employee
from timesheet_api.common.errors import ValidationError
from timesheet_api.common.http import ok
from timesheet_api.services.ai_composer import OpenAISuggester, compose
from timesheet_api.services.expectations import expected_week
from timesheet_api.services.weeks import is_date_iso

bp = Blueprint("ai", __name__, url_prefix="/api/v1/ai")


def _suggester():
    """An injected suggester (app.extensions["ai_suggester"]) wins over the HTTP client."""
    injected = current_app.extensions.get("ai_suggester")
    if injected is not None:
        return injected
    return OpenAISuggester.from_config(current_app.config)


@bp.post("/suggest")
@requires_employee
def suggest(emp):
    """
    POST /api/v1/ai/suggest
    {"command": "sick on monday, full days otherwise", "week_start": "2024-01-01",
     "allowed_dates": ["2024-01-01", ..., "2024-01-05"]}
    """
    j = request.get_json(silent=True) or {}
    week_start = j.get("week_start")
    if not is_date_iso(week_start):
        raise ValidationError("week_start must be YYYY-MM-DD", payload={"field": "week_start"})
    try:
        expected = expected_week(emp.settings_id, week_start)
    except ValueError:
        raise ValidationError("week_start must be YYYY-MM-DD", payload={"field": "week_start"})

    result = compose(j.get("command"), week_start, j.get("allowed_dates"), expected, _suggester())
    return ok(result)
