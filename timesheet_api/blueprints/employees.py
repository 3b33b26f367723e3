# timesheet_api/blueprints/employees.py
from flask import Blueprint, request

from timesheet_api.common.auth import requires_admin, requires_user, employee_for_user
from timesheet_api.common.errors import NotFoundError
from timesheet_api.common.http import ok
from timesheet_api.common.paging import order_by_param, page_limit
from timesheet_api.extensions import db
from timesheet_api.models.employee import Employee
from timesheet_api.services.employees import create_employee, delete_employees, update_employee

bp = Blueprint("employees", __name__, url_prefix="/api/v1/employees")


@bp.get("")
@requires_admin
def list_employees(_uid):
    q = Employee.query.order_by(*order_by_param(
        {"surname": Employee.surname, "name": Employee.name, "start_date": Employee.start_date, "id": Employee.id},
        default=[Employee.surname.asc(), Employee.name.asc()],
    ))
    page, size = page_limit()
    total = q.count()
    rows = q.offset((page - 1) * size).limit(size).all()
    return ok([e.to_dict() for e in rows], page=page, size=size, total=total)


@bp.get("/me")
@requires_user
def me(uid):
    emp = employee_for_user(uid)
    if not emp:
        raise NotFoundError("No employee profile")
    return ok(emp.to_dict())


@bp.get("/<int:emp_id>")
@requires_admin
def get_employee(_uid, emp_id: int):
    emp = db.session.get(Employee, emp_id)
    if not emp:
        raise NotFoundError("Employee not found")
    return ok(emp.to_dict())


@bp.post("")
@requires_admin
def post_employee(_uid):
    emp = create_employee(request.get_json(silent=True) or {})
    return ok(emp.to_dict(), 201)


@bp.put("/<int:emp_id>")
@requires_admin
def put_employee(_uid, emp_id: int):
    emp = update_employee(emp_id, request.get_json(silent=True) or {})
    return ok(emp.to_dict())


@bp.delete("")
@requires_admin
def remove_employees(uid):
    j = request.get_json(silent=True) or {}
    deleted = delete_employees(j.get("ids"), caller_user_id=uid)
    return ok({"deleted": deleted})
