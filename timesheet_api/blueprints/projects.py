from flask import Blueprint

from timesheet_api.common.auth import requires_user
from timesheet_api.common.http import ok
from timesheet_api.models.project import Project

bp = Blueprint("projects", __name__, url_prefix="/api/v1/projects")


@bp.get("")
@requires_user
def list_projects(_uid):
    rows = Project.query.filter(Project.active.is_(True)).order_by(Project.name.asc()).all()
    return ok([p.to_dict() for p in rows])
