import os
from datetime import date

import pytest
from flask_jwt_extended import create_access_token

os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-long-enough-for-hs256-signing")

from timesheet_api import create_app
from timesheet_api.extensions import db
from timesheet_api.models.employee import Employee
from timesheet_api.models.project import Project
from timesheet_api.models.settings import Settings


def _mk_app():
    os.environ["DATABASE_URL"] = "sqlite:///:memory:"
    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture
def app():
    app = _mk_app()
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Pushed app context for service-level tests."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_settings(app):
    def _make(hours=(8, 8, 8, 8, 8, 0, 0), is_default=False, name="Schedule"):
        with app.app_context():
            mon, tue, wed, thu, fri, sat, sun = hours
            s = Settings(name=name, mon_hours=mon, tue_hours=tue, wed_hours=wed, thu_hours=thu,
                         fri_hours=fri, sat_hours=sat, sun_hours=sun, is_default=is_default)
            db.session.add(s); db.session.commit()
            return s.id
    return _make


@pytest.fixture
def make_employee(app):
    def _make(user_id="user-1", name="Ana", surname="Horvat", settings_id=None,
              start_date=None, end_date=None):
        with app.app_context():
            e = Employee(user_id=user_id, name=name, surname=surname, settings_id=settings_id,
                         start_date=start_date, end_date=end_date)
            db.session.add(e); db.session.commit()
            return e.id
    return _make


@pytest.fixture
def make_project(app):
    def _make(name="Internal", code="INT-001", active=True):
        with app.app_context():
            p = Project(name=name, code=code, active=active)
            db.session.add(p); db.session.commit()
            return p.id
    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user_id="user-1", admin=False):
        with app.app_context():
            token = create_access_token(identity=str(user_id), additional_claims={"is_admin": admin})
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def monday():
    return date(2024, 1, 1)
