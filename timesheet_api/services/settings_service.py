# timesheet_api/services/settings_service.py
from __future__ import annotations

from decimal import Decimal
import logging
import math

from timesheet_api.common.errors import NotFoundError, ValidationError
from timesheet_api.extensions import db
from timesheet_api.models.employee import Employee
from timesheet_api.models.settings import FALLBACK_HOURS, WEEKDAY_FIELDS, Settings
from timesheet_api.services.expectations import find_settings_row

log = logging.getLogger(__name__)


def _hours(field, raw) -> Decimal:
    if isinstance(raw, bool) or raw is None or raw == "":
        raise ValidationError("Invalid hours", payload={"field": field})
    try:
        h = float(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid hours", payload={"field": field})
    if not math.isfinite(h) or not (0 <= h <= 24):
        raise ValidationError("Invalid hours", payload={"field": field})
    return Decimal(str(h)).quantize(Decimal("0.01"))


def validate_hours_form(j: dict, partial: bool = False) -> dict:
    """
    Body -> column values. Every weekday is required unless `partial`
    (PUT keeps what is not sent). Hours must be within 0..24.
    """
    out = {}
    for f in WEEKDAY_FIELDS:
        if f not in j:
            if partial:
                continue
            raise ValidationError("Invalid hours", payload={"field": f})
        out[f] = _hours(f, j.get(f))

    if "name" in j:
        name = (j.get("name") or "").strip()
        if not name:
            raise ValidationError("name must not be empty", payload={"field": "name"})
        out["name"] = name[:120]

    if "is_default" in j:
        out["is_default"] = bool(j.get("is_default"))
    return out


def set_exclusive_default(row: Settings):
    """
    Make `row` the only default. Clearing the others and setting this one happen
    in the caller's transaction, so no commit is done here.
    """
    db.session.flush()
    (Settings.query
        .filter(Settings.id != row.id, Settings.is_default.is_(True))
        .update({"is_default": False}, synchronize_session="fetch"))
    row.is_default = True


def save_settings(values: dict, settings_id: int | None = None) -> Settings:
    """Insert (no id) or update a Settings row; `is_default=True` is applied exclusively."""
    try:
        if settings_id:
            row = db.session.get(Settings, settings_id)
            if not row:
                raise NotFoundError(f"Settings {settings_id} not found")
        else:
            row = Settings(name=values.get("name") or "Default")
            db.session.add(row)

        make_default = values.get("is_default")
        for k, v in values.items():
            if k != "is_default":
                setattr(row, k, v)

        if make_default:
            set_exclusive_default(row)
        elif make_default is False:
            row.is_default = False

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    log.info("settings %s saved (default=%s)", row.id, row.is_default)
    return row


def make_default(settings_id: int) -> Settings:
    return save_settings({"is_default": True}, settings_id=settings_id)


def delete_settings(ids) -> int:
    """Delete by ids; employees pointing at a deleted row fall back to the default."""
    if not isinstance(ids, list) or not ids:
        raise ValidationError("ids[] (positive integers) is required", payload={"field": "ids"})
    try:
        clean = [int(x) for x in ids if not isinstance(x, bool)]
    except (TypeError, ValueError):
        raise ValidationError("ids[] (positive integers) is required", payload={"field": "ids"})
    if len(clean) != len(ids) or any(x <= 0 for x in clean):
        raise ValidationError("ids[] (positive integers) is required", payload={"field": "ids"})

    rows = Settings.query.filter(Settings.id.in_(clean)).all()
    try:
        for r in rows:
            db.session.delete(r)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return len(rows)


def effective_settings(employee: Employee | None) -> dict:
    """Schedule that applies to `employee`: own settings, else default, else built-in."""
    row = find_settings_row(employee.settings_id if employee else None)
    if row is not None:
        return {**row.to_dict(), "fallback": False}
    d = {"id": None, "name": "Built-in", "is_default": False, "updated_at": None, "fallback": True}
    for f, h in zip(WEEKDAY_FIELDS, FALLBACK_HOURS):
        d[f] = float(h)
    return d
