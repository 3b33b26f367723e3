# timesheet_api/common/auth.py
from __future__ import annotations

from functools import wraps

from flask_jwt_extended import JWTManager, jwt_required, get_jwt, get_jwt_identity

from timesheet_api.common.http import fail
from timesheet_api.models.employee import Employee

jwt = JWTManager()


# ---------- helpers ----------

def is_admin_claims(claims: dict | None) -> bool:
    """
    The identity provider marks administrators with an `is_admin` claim.
    Supabase-style tokens carry it under `app_metadata`, so both spots are read.
    """
    claims = claims or {}
    if claims.get("is_admin") is True:
        return True
    meta = claims.get("app_metadata") or {}
    return isinstance(meta, dict) and meta.get("is_admin") is True


def current_identity():
    """Return `(user_id, is_admin)` for the verified token of this request."""
    return get_jwt_identity(), is_admin_claims(get_jwt())


def employee_for_user(user_id) -> Employee | None:
    if not user_id:
        return None
    return Employee.query.filter_by(user_id=str(user_id)).first()


# ---------- decorators ----------

def requires_user(fn):
    """Any valid bearer token. The view receives the caller's user id."""
    @wraps(fn)
    @jwt_required()
    def inner(*args, **kwargs):
        uid = get_jwt_identity()
        if not uid:
            return fail("Unauthorized", status=401)
        return fn(uid, *args, **kwargs)
    return inner


def requires_employee(fn):
    """
    Valid token AND an employee profile linked to the caller.
    The view receives the Employee row as its first argument.
    """
    @wraps(fn)
    @jwt_required()
    def inner(*args, **kwargs):
        emp = employee_for_user(get_jwt_identity())
        if not emp:
            return fail("No employee profile", status=403, code="NO_EMPLOYEE")
        return fn(emp, *args, **kwargs)
    return inner


def requires_admin(fn):
    """Valid token carrying the admin claim. The view receives the caller's user id."""
    @wraps(fn)
    @jwt_required()
    def inner(*args, **kwargs):
        uid, admin = current_identity()
        if not uid:
            return fail("Unauthorized", status=401)
        if not admin:
            return fail("Forbidden: admin only", status=403, code="FORBIDDEN")
        return fn(uid, *args, **kwargs)
    return inner


# ---------- JWT failure envelopes ----------

@jwt.unauthorized_loader
def _missing_token(reason):
    return fail("Missing or invalid Authorization header", status=401, code="UNAUTHENTICATED", detail=reason)


@jwt.invalid_token_loader
def _invalid_token(reason):
    return fail("Invalid or expired token", status=401, code="UNAUTHENTICATED", detail=reason)


@jwt.expired_token_loader
def _expired_token(_header, _payload):
    return fail("Invalid or expired token", status=401, code="UNAUTHENTICATED")
