from datetime import date

from timesheet_api.extensions import db
from timesheet_api.models.day_entry import DayEntry
from timesheet_api.models.period import Period


def test_health(client):
    r = client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.get_json()["data"]["status"] == "ok"


def test_requires_token(client):
    r = client.get("/api/v1/entries?from=2024-01-01&to=2024-01-07")
    assert r.status_code == 401
    body = r.get_json()
    assert body["success"] is False
    assert body["error"]["code"] == "UNAUTHENTICATED"


def test_token_without_employee_profile(client, auth_headers):
    r = client.get("/api/v1/entries?from=2024-01-01&to=2024-01-07", headers=auth_headers("ghost"))
    assert r.status_code == 403
    assert r.get_json()["error"]["code"] == "NO_EMPLOYEE"


def test_write_read_close_cycle(app, client, auth_headers, make_employee):
    make_employee(user_id="user-1")
    h = auth_headers("user-1")

    r = client.put("/api/v1/entries", headers=h, json={"entries": {
        "2024-01-01": [{"type": "work", "hours": 6, "note": "sprint"}, {"type": "sick", "hours": 2}],
        "2024-01-02": [{"type": "work", "hours": 8}],
    }})
    assert r.status_code == 200, r.get_json()
    assert r.get_json()["data"]["period"]["total_hours"] == 16.0

    r = client.get("/api/v1/entries?from=2024-01-01&to=2024-01-07", headers=h)
    data = r.get_json()["data"]
    assert data["totals"]["2024-01-01"]["type"] == "mixed"
    assert data["period"]["week_key"] == "2024-W01"

    r = client.patch("/api/v1/periods", headers=h, json={"week_key": "2024-W01", "action": "close"})
    assert r.status_code == 200
    assert r.get_json()["data"]["closed"] is True

    r = client.put("/api/v1/entries", headers=h, json={"entries": {"2024-01-03": [{"type": "work", "hours": 8}]}})
    assert r.status_code == 409
    assert r.get_json()["error"]["code"] == "PERIOD_CLOSED"

    with app.app_context():
        assert DayEntry.query.filter_by(work_date=date(2024, 1, 3)).count() == 0
        assert float(Period.query.one().total_hours) == 16.0

    r = client.patch("/api/v1/periods", headers=h,
                     json={"period": {"week_start_date": "2024-01-01"}, "action": "reopen"})
    assert r.status_code == 200
    assert r.get_json()["data"]["closed"] is False


def test_put_entries_validation(client, auth_headers, make_employee):
    make_employee(user_id="user-1")
    h = auth_headers("user-1")

    r = client.put("/api/v1/entries", headers=h, json={"entries": {"2024-01-01": [{"type": "nap", "hours": 1}]}})
    assert r.status_code == 422
    assert r.get_json()["error"]["code"] == "VALIDATION_ERROR"

    r = client.put("/api/v1/entries", headers=h, json={})
    assert r.status_code == 422


def test_patch_period_validation(client, auth_headers, make_employee):
    make_employee(user_id="user-1")
    h = auth_headers("user-1")

    assert client.patch("/api/v1/periods", headers=h, json={"week_key": "2024-W01", "action": "lock"}).status_code == 422
    assert client.patch("/api/v1/periods", headers=h, json={"week_key": "W01", "action": "close"}).status_code == 422
    assert client.patch("/api/v1/periods", headers=h, json={"week_key": "2030-W01", "action": "close"}).status_code == 404


def test_week_summaries_endpoint(client, auth_headers, make_employee):
    make_employee(user_id="user-1")
    h = auth_headers("user-1")
    client.put("/api/v1/entries", headers=h, json={"entries": {"2024-01-02": [{"type": "work", "hours": 4}]}})

    r = client.get("/api/v1/week-summaries?from=2024-01-01&to=2024-01-14", headers=h)
    body = r.get_json()
    assert r.status_code == 200
    assert body["data"][0] == {"monday": "2024-01-01", "days_with_entries": 1, "closed": False}
    assert body["meta"]["range"] == {"from": "2024-01-01", "to": "2024-01-14"}


def test_settings_admin_and_employee_views(client, auth_headers, make_employee):
    make_employee(user_id="user-1")
    admin = auth_headers("admin-1", admin=True)
    user = auth_headers("user-1")
    week = {"mon_hours": 6, "tue_hours": 6, "wed_hours": 6, "thu_hours": 6,
            "fri_hours": 6, "sat_hours": 0, "sun_hours": 0}

    assert client.post("/api/v1/settings", headers=user, json=week).status_code == 403

    r = client.post("/api/v1/settings", headers=admin, json={**week, "name": "Part time", "is_default": True})
    assert r.status_code == 201
    sid = r.get_json()["data"]["id"]

    r = client.get("/api/v1/settings", headers=user)
    assert r.get_json()["data"]["mon_hours"] == 6.0
    assert r.get_json()["data"]["fallback"] is False

    r = client.put(f"/api/v1/settings/{sid}", headers=admin, json={"mon_hours": 30})
    assert r.status_code == 422

    r = client.get(f"/api/v1/settings?id={sid}", headers=admin)
    assert r.get_json()["data"]["name"] == "Part time"

    r = client.delete("/api/v1/settings", headers=admin, json={"ids": [sid]})
    assert r.get_json()["data"]["deleted"] == 1

    r = client.get("/api/v1/settings", headers=user)
    assert r.get_json()["data"]["fallback"] is True


def test_employees_admin_only(client, auth_headers, make_employee):
    make_employee(user_id="user-1")
    admin = auth_headers("admin-1", admin=True)

    assert client.get("/api/v1/employees", headers=auth_headers("user-1")).status_code == 403

    r = client.post("/api/v1/employees", headers=admin,
                    json={"name": "Nik", "surname": "Rus", "user_id": "user-2"})
    assert r.status_code == 201
    new_id = r.get_json()["data"]["id"]

    r = client.get("/api/v1/employees", headers=admin)
    assert r.get_json()["meta"]["total"] == 2

    r = client.get("/api/v1/employees?sort=-id", headers=admin)
    assert r.get_json()["data"][0]["id"] == new_id

    r = client.put(f"/api/v1/employees/{new_id}", headers=admin, json={"end_date": "2024-06-30"})
    assert r.get_json()["data"]["end_date"] == "2024-06-30"

    r = client.get("/api/v1/employees/me", headers=auth_headers("user-2"))
    assert r.get_json()["data"]["id"] == new_id

    r = client.delete("/api/v1/employees", headers=admin, json={"ids": [new_id]})
    assert r.get_json()["data"]["deleted"] == 1
    assert client.get(f"/api/v1/employees/{new_id}", headers=admin).status_code == 404


def test_admin_claim_under_app_metadata(app, client, make_employee):
    from flask_jwt_extended import create_access_token

    with app.app_context():
        token = create_access_token(identity="admin-2", additional_claims={"app_metadata": {"is_admin": True}})
    r = client.get("/api/v1/employees", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200


def test_projects_lists_active_only(client, auth_headers, make_project):
    make_project(name="Acme")
    make_project(name="Legacy", code="OLD", active=False)

    r = client.get("/api/v1/projects", headers=auth_headers("anyone"))
    assert [p["name"] for p in r.get_json()["data"]] == ["Acme"]


def test_ai_suggest_with_injected_suggester(app, client, auth_headers, make_employee):
    make_employee(user_id="user-1")
    app.extensions["ai_suggester"] = lambda command, context: {
        "suggestions": [
            {"date": "2024-01-01", "entries": [{"hours": 40, "type": "work"}]},
            {"date": "2024-01-09", "entries": [{"hours": 8, "type": "work"}]},
        ],
        "rationale": "full monday",
    }

    r = client.post("/api/v1/ai/suggest", headers=auth_headers("user-1"), json={
        "command": "full day monday",
        "week_start": "2024-01-01",
        "allowed_dates": ["2024-01-01", "2024-01-02"],
    })
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert data["applicable"] is True
    assert data["suggestions"] == [{"date": "2024-01-01", "entries": [{"hours": 24.0, "type": "work"}]}]


def test_ai_suggest_without_api_key(app, client, auth_headers, make_employee):
    make_employee(user_id="user-1")
    app.config["OPENAI_API_KEY"] = None

    r = client.post("/api/v1/ai/suggest", headers=auth_headers("user-1"), json={
        "command": "work",
        "week_start": "2024-01-01",
        "allowed_dates": ["2024-01-01"],
    })
    assert r.status_code == 502


def test_reports_endpoints(client, auth_headers, make_employee):
    make_employee(user_id="user-1")
    admin = auth_headers("admin-1", admin=True)
    client.put("/api/v1/entries", headers=auth_headers("user-1"),
               json={"entries": {"2024-01-01": [{"type": "work", "hours": 10}]}})

    r = client.get("/api/v1/reports/by-dates?from=2024-01-01&to=2024-01-01&employee_id=all", headers=admin)
    assert r.status_code == 200
    row = r.get_json()["data"][0]
    assert row["extra_work_hours"] == 2.0

    r = client.get("/api/v1/reports/missing-periods?before=2024-01-08", headers=admin)
    assert r.get_json()["data"]["count"] == 1

    assert client.get("/api/v1/reports/by-dates?from=x&to=y", headers=admin).status_code == 422
    assert client.get("/api/v1/reports/missing-periods", headers=auth_headers("user-1")).status_code == 403
