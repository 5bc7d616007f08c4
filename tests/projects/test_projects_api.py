# -*- coding: utf-8 -*-
"""Project lifecycle through the HTTP API."""
import pytest

from constants.roles import Role
from extensions.database import db
from models import Document, Project, ProjectMember

PROJECTS = "/api/projects"


@pytest.fixture()
def payload(lead, developers):
    return {
        "name": "Apollo",
        "description": "Moon shot",
        "deadline": "2030-06-30",
        "lead": lead.id,
        "team": [{"userId": d.id} for d in developers],
    }


def test_admin_creates_project(client, admin, auth_headers, payload, lead, developers):
    resp = client.post(PROJECTS, json=payload, headers=auth_headers(admin))
    assert resp.status_code == 201, resp.get_json()
    data = resp.get_json()["data"]
    assert data["status"] == "active"
    assert data["deadline"] == "2030-06-30"
    assert data["lead"] == {"id": lead.id, "name": lead.name, "email": lead.email, "role": "lead"}
    assert sorted(m["user_id"] for m in data["team"]) == sorted(d.id for d in developers)
    assert all("password_hash" not in m["user"] for m in data["team"])


@pytest.mark.parametrize("missing", ["name", "description", "deadline", "lead"])
def test_create_requires_fields(client, admin, auth_headers, payload, missing):
    payload.pop(missing)
    resp = client.post(PROJECTS, json=payload, headers=auth_headers(admin))
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Please provide name, description, deadline, and lead"


def test_create_with_unknown_lead(client, admin, auth_headers, payload):
    payload["lead"] = 9999
    resp = client.post(PROJECTS, json=payload, headers=auth_headers(admin))
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Lead user not found"


def test_create_with_one_unknown_member_persists_nothing(client, admin, auth_headers, payload):
    payload["team"].append({"userId": 9999})
    resp = client.post(PROJECTS, json=payload, headers=auth_headers(admin))
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "One or more team members not found"
    assert Project.query.count() == 0
    assert ProjectMember.query.count() == 0


def test_create_rejects_bad_status_and_deadline(client, admin, auth_headers, payload):
    headers = auth_headers(admin)
    assert client.post(PROJECTS, json={**payload, "status": "paused"}, headers=headers).status_code == 400
    assert client.post(PROJECTS, json={**payload, "deadline": "someday"}, headers=headers).status_code == 400


def test_only_admin_creates(client, lead, auth_headers, payload):
    resp = client.post(PROJECTS, json=payload, headers=auth_headers(lead))
    assert resp.status_code == 403


def test_get_checks_visibility(client, make_project, lead, developers, make_user, auth_headers):
    project = make_project(team=[developers[0]])
    assert client.get(f"{PROJECTS}/{project.id}", headers=auth_headers(developers[0])).status_code == 200
    assert client.get(f"{PROJECTS}/{project.id}", headers=auth_headers(lead)).status_code == 200
    assert client.get(f"{PROJECTS}/{project.id}", headers=auth_headers(developers[1])).status_code == 403
    other_lead = make_user(Role.LEAD)
    assert client.get(f"{PROJECTS}/{project.id}", headers=auth_headers(other_lead)).status_code == 403


def test_get_missing_project(client, admin, auth_headers):
    resp = client.get(f"{PROJECTS}/404", headers=auth_headers(admin))
    assert resp.status_code == 404
    assert resp.get_json() == {"status": "fail", "message": "Project not found", "data": None}


def test_lead_updates_own_project_partially(client, make_project, lead, auth_headers):
    project = make_project()
    resp = client.put(
        f"{PROJECTS}/{project.id}",
        json={"description": "Updated", "deadline": "2031-01-01"},
        headers=auth_headers(lead),
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["description"] == "Updated"
    assert data["deadline"] == "2031-01-01"
    assert data["name"] == project.name
    assert data["status"] == "active"


def test_blank_strings_keep_stored_values(client, make_project, admin, auth_headers):
    project = make_project(name="Keep me")
    resp = client.put(
        f"{PROJECTS}/{project.id}",
        json={"name": "", "description": "   ", "status": None},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["name"] == "Keep me"
    assert data["description"] == "Seeded project"


def test_lead_reassignment_by_non_admin_is_ignored(client, make_project, lead, make_user, auth_headers):
    project = make_project()
    newcomer = make_user(Role.LEAD)
    resp = client.put(
        f"{PROJECTS}/{project.id}",
        json={"lead": newcomer.id, "name": "Renamed"},
        headers=auth_headers(lead),
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["lead"]["id"] == lead.id
    assert data["name"] == "Renamed"


def test_admin_reassigns_lead(client, make_project, admin, make_user, auth_headers):
    project = make_project()
    newcomer = make_user(Role.LEAD)
    headers = auth_headers(admin)
    resp = client.put(f"{PROJECTS}/{project.id}", json={"lead": newcomer.id}, headers=headers)
    assert resp.get_json()["data"]["lead"]["id"] == newcomer.id
    bad = client.put(f"{PROJECTS}/{project.id}", json={"lead": 9999}, headers=headers)
    assert bad.status_code == 400
    assert bad.get_json()["message"] == "Lead user not found"


def test_team_is_replaced_not_merged(client, make_project, lead, developers, make_user, auth_headers):
    project = make_project(team=developers)
    third = make_user(Role.DEVELOPER)
    headers = auth_headers(lead)
    resp = client.put(
        f"{PROJECTS}/{project.id}",
        json={"team": [{"userId": developers[1].id}, {"userId": third.id}]},
        headers=headers,
    )
    assert resp.status_code == 200
    assert sorted(m["user_id"] for m in resp.get_json()["data"]["team"]) == sorted([developers[1].id, third.id])

    bad = client.put(
        f"{PROJECTS}/{project.id}",
        json={"team": [{"userId": third.id}, {"userId": 9999}]},
        headers=headers,
    )
    assert bad.status_code == 400
    db.session.expire_all()
    assert sorted(db.session.get(Project, project.id).team_user_ids) == sorted([developers[1].id, third.id])

    emptied = client.put(f"{PROJECTS}/{project.id}", json={"team": []}, headers=headers)
    assert emptied.get_json()["data"]["team"] == []


def test_update_forbidden_for_other_lead_and_members(client, make_project, developers, make_user, auth_headers):
    project = make_project(team=developers)
    for actor in (developers[0], make_user(Role.LEAD)):
        resp = client.put(f"{PROJECTS}/{project.id}", json={"name": "x"}, headers=auth_headers(actor))
        assert resp.status_code == 403


def test_update_missing_project(client, admin, auth_headers):
    assert client.put(f"{PROJECTS}/999", json={"name": "x"}, headers=auth_headers(admin)).status_code == 404


def test_delete_cascades_documents(client, app, make_project, make_document, admin, lead, auth_headers):
    project = make_project()
    other = make_project()
    for i in range(3):
        make_document(project, lead, name=f"doc{i}.txt")
    make_document(project, lead, link="https://example.com/x", name="link")
    kept = make_document(other, lead)

    statements = []

    from sqlalchemy import event

    def _capture(conn, cursor, statement, params, context, executemany):
        if statement.lstrip().upper().startswith("DELETE"):
            statements.append(statement)

    engine = db.engine
    event.listen(engine, "before_cursor_execute", _capture)
    try:
        resp = client.delete(f"{PROJECTS}/{project.id}", headers=auth_headers(admin))
    finally:
        event.remove(engine, "before_cursor_execute", _capture)

    assert resp.status_code == 200
    assert Document.query.filter_by(project_id=project.id).count() == 0
    assert db.session.get(Project, project.id) is None
    assert db.session.get(Document, kept.id) is not None

    tables = [s.split("FROM", 1)[1].split()[0].strip('"`') for s in statements]
    assert tables.index("document") < tables.index("project")


def test_delete_requires_admin(client, make_project, lead, auth_headers):
    project = make_project()
    assert client.delete(f"{PROJECTS}/{project.id}", headers=auth_headers(lead)).status_code == 403
    assert client.delete(f"{PROJECTS}/999", headers=auth_headers(lead)).status_code == 403


def test_delete_missing_project(client, admin, auth_headers):
    assert client.delete(f"{PROJECTS}/999", headers=auth_headers(admin)).status_code == 404


def test_available_users_lists_leads_and_developers(client, admin, lead, developers):
    resp = client.get(f"{PROJECTS}/available-users")
    assert resp.status_code == 200
    ids = {u["id"] for u in resp.get_json()["data"]}
    assert ids == {lead.id} | {d.id for d in developers}
    assert all(set(u) == {"id", "name", "email", "role"} for u in resp.get_json()["data"])


def test_developer_lead_updates_own_project(client, make_project, developers, auth_headers):
    project = make_project(lead_user=developers[0])
    resp = client.put(f"{PROJECTS}/{project.id}", json={"status": "completed"}, headers=auth_headers(developers[0]))
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "completed"

    other = client.put(f"{PROJECTS}/{project.id}", json={"name": "x"}, headers=auth_headers(developers[1]))
    assert other.status_code == 403


def test_malformed_lead_from_non_admin_is_ignored(client, make_project, lead, auth_headers):
    project = make_project()
    resp = client.put(f"{PROJECTS}/{project.id}", json={"name": "New", "lead": "abc"}, headers=auth_headers(lead))
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["name"] == "New"
    assert data["lead"]["id"] == lead.id


def test_malformed_lead_from_admin_is_rejected(client, make_project, admin, auth_headers):
    project = make_project(name="Unchanged")
    resp = client.put(f"{PROJECTS}/{project.id}", json={"name": "New", "lead": "abc"}, headers=auth_headers(admin))
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Lead user not found"
    db.session.expire_all()
    assert db.session.get(Project, project.id).name == "Unchanged"


def test_update_checks_existence_and_permission_before_input(client, make_project, make_user, admin, auth_headers):
    project = make_project()
    bad = {"deadline": "not-a-date", "status": "archived", "team": "nobody"}
    outsider = client.put(f"{PROJECTS}/{project.id}", json=bad, headers=auth_headers(make_user(Role.LEAD)))
    assert outsider.status_code == 403
    missing = client.put(f"{PROJECTS}/999", json=bad, headers=auth_headers(admin))
    assert missing.status_code == 404
    invalid = client.put(f"{PROJECTS}/{project.id}", json=bad, headers=auth_headers(admin))
    assert invalid.status_code == 400


@pytest.mark.parametrize("body", [[1, 2], "text", 42])
def test_non_object_json_body_is_rejected(client, make_project, admin, auth_headers, body):
    headers = auth_headers(admin)
    created = client.post(PROJECTS, json=body, headers=headers)
    assert created.status_code == 400
    assert created.get_json() == {
        "status": "fail",
        "message": "Request body must be a JSON object",
        "data": None,
    }
    project = make_project()
    updated = client.put(f"{PROJECTS}/{project.id}", json=body, headers=headers)
    assert updated.status_code == 400
    assert client.post("/api/auth/login", json=body).status_code == 400
