# timesheet_api/blueprints/settings.py
from flask import Blueprint, request
from flask_jwt_extended import get_jwt

from timesheet_api.common.auth import requires_admin, requires_user, is_admin_claims, employee_for_user
from timesheet_api.common.errors import NotFoundError, ValidationError
from timesheet_api.common.http import ok
from timesheet_api.extensions import db
from timesheet_api.models.settings import Settings
from timesheet_api.services.settings_service import (
    delete_settings, effective_settings, save_settings, validate_hours_form,
)

bp = Blueprint("settings", __name__, url_prefix="/api/v1/settings")


@bp.get("")
@requires_user
def get_settings(uid):
    """
    Admin: every row, or one with ?id=.
    Anyone else: the schedule that applies to them (own, default or built-in).
    """
    if not is_admin_claims(get_jwt()):
        return ok(effective_settings(employee_for_user(uid)))

    sid = request.args.get("id")
    if sid:
        try:
            sid = int(sid)
        except ValueError:
            raise ValidationError("id must be integer", payload={"field": "id"})
        row = db.session.get(Settings, sid)
        if not row:
            raise NotFoundError("Not found")
        return ok(row.to_dict())

    rows = Settings.query.order_by(Settings.id.asc()).all()
    return ok([r.to_dict() for r in rows])


@bp.post("")
@requires_admin
def create_settings(_uid):
    j = request.get_json(silent=True) or {}
    row = save_settings(validate_hours_form(j))
    return ok(row.to_dict(), 201)


@bp.put("/<int:settings_id>")
@requires_admin
def update_settings(_uid, settings_id: int):
    j = request.get_json(silent=True) or {}
    row = save_settings(validate_hours_form(j, partial=True), settings_id=settings_id)
    return ok(row.to_dict())


@bp.delete("")
@requires_admin
def remove_settings(_uid):
    j = request.get_json(silent=True) or {}
    deleted = delete_settings(j.get("ids"))
    return ok({"deleted": deleted})
