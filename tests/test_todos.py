import pytest
from fastapi.testclient import TestClient

from conftest import make_settings, register_and_login, todo_payload, utc_today
from taskboard_web.main import create_app


def test_register_login_create_and_fetch(client):
    headers = register_and_login(client, "a@x.com", "pw")

    res = client.post(
        "/api/todos", json=todo_payload("Write report", userEmail="a@x.com"), headers=headers
    )
    assert res.status_code == 200, res.text
    created = res.json()
    assert created["_id"]
    assert created["userEmail"] == "a@x.com"
    assert created["complete"] is False

    res = client.get("/api/todos/a@x.com", headers=headers)
    assert res.status_code == 200
    todos = res.json()
    assert len(todos) == 1
    assert todos[0]["title"] == "Write report"
    assert todos[0]["dueDate"] == todo_payload()["dueDate"]


def test_owner_defaults_to_caller(client):
    headers = register_and_login(client, "default@x.com")
    res = client.post("/api/todos", json=todo_payload(), headers=headers)
    assert res.status_code == 200, res.text
    assert res.json()["userEmail"] == "default@x.com"


def test_owner_email_alias_accepted(client):
    headers = register_and_login(client, "alias@x.com")
    res = client.post("/api/todos", json=todo_payload(ownerEmail="ALIAS@x.com"), headers=headers)
    assert res.status_code == 200, res.text
    assert res.json()["userEmail"] == "alias@x.com"


def test_todo_not_visible_to_other_owner(client, admin_headers):
    alice = register_and_login(client, "alice@x.com")
    bob = register_and_login(client, "bob@x.com")
    client.post("/api/todos", json=todo_payload("Alice's"), headers=alice)

    assert client.get("/api/todos/bob@x.com", headers=bob).json() == []

    res = client.get("/api/todos/alice@x.com", headers=bob)
    assert res.status_code == 403
    assert res.json()["message"] == "Not allowed"

    res = client.get("/api/todos/alice@x.com", headers=admin_headers)
    assert res.status_code == 200
    assert [t["title"] for t in res.json()] == ["Alice's"]


def test_create_requires_token(client):
    res = client.post("/api/todos", json=todo_payload())
    assert res.status_code == 401


def test_due_date_in_past_rejected(client):
    headers = register_and_login(client, "past@x.com")
    res = client.post("/api/todos", json=todo_payload(days_ahead=-1), headers=headers)
    assert res.status_code == 400
    assert res.json()["message"] == "Due date cannot be in the past"


def test_due_date_today_accepted(client):
    headers = register_and_login(client, "today@x.com")
    res = client.post("/api/todos", json=todo_payload(days_ahead=0), headers=headers)
    assert res.status_code == 200, res.text
    assert res.json()["dueDate"] == utc_today().isoformat()


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": ""},
        {"description": "   "},
        {"priority": "Urgent"},
        {"dueDate": "tomorrow"},
        {"unexpected": "field"},
    ],
)
def test_create_rejects_invalid_fields(client, overrides):
    headers = register_and_login(client, "invalid@x.com")
    res = client.post("/api/todos", json=todo_payload(**overrides), headers=headers)
    assert res.status_code == 400
    assert res.json()["message"]


def test_create_rejects_missing_field(client):
    headers = register_and_login(client, "missing@x.com")
    payload = todo_payload()
    del payload["tag"]
    res = client.post("/api/todos", json=payload, headers=headers)
    assert res.status_code == 400


def test_update_merges_fields(client):
    headers = register_and_login(client, "upd@x.com")
    todo = client.post("/api/todos", json=todo_payload("Old title"), headers=headers).json()

    res = client.put(
        f"/api/todos/{todo['_id']}", json={"title": "New title", "complete": True}, headers=headers
    )
    assert res.status_code == 200, res.text
    updated = res.json()
    assert updated["title"] == "New title"
    assert updated["complete"] is True
    assert updated["description"] == todo["description"]
    assert updated["_id"] == todo["_id"]


def test_update_accepts_full_todo_from_listing(client):
    headers = register_and_login(client, "full@x.com")
    client.post("/api/todos", json=todo_payload("Round trip"), headers=headers)
    todo = client.get("/api/todos/full@x.com", headers=headers).json()[0]

    res = client.put(
        f"/api/todos/{todo['_id']}",
        json={**todo, "complete": not todo["complete"], "__v": 0},
        headers=headers,
    )
    assert res.status_code == 200, res.text
    updated = res.json()
    assert updated["complete"] is True
    assert updated["_id"] == todo["_id"]
    assert updated["createdAt"] == todo["createdAt"]


def test_update_cannot_change_id(client):
    headers = register_and_login(client, "fixed@x.com")
    todo = client.post("/api/todos", json=todo_payload(), headers=headers).json()

    res = client.put(
        f"/api/todos/{todo['_id']}", json={"_id": "other", "title": "Renamed"}, headers=headers
    )
    assert res.status_code == 200
    assert res.json()["_id"] == todo["_id"]
    assert client.put("/api/todos/other", json={"title": "x"}, headers=headers).status_code == 404


def test_update_does_not_recheck_due_date(client):
    headers = register_and_login(client, "late@x.com")
    todo = client.post("/api/todos", json=todo_payload(), headers=headers).json()
    res = client.put(
        f"/api/todos/{todo['_id']}", json={"dueDate": "2000-01-01"}, headers=headers
    )
    assert res.status_code == 200
    assert res.json()["dueDate"] == "2000-01-01"


def test_update_ignores_nulls_and_rejects_bad_types(client):
    headers = register_and_login(client, "nulls@x.com")
    todo = client.post("/api/todos", json=todo_payload("Keep me"), headers=headers).json()

    res = client.put(f"/api/todos/{todo['_id']}", json={"title": None}, headers=headers)
    assert res.status_code == 200
    assert res.json()["title"] == "Keep me"

    res = client.put(f"/api/todos/{todo['_id']}", json={"priority": "Someday"}, headers=headers)
    assert res.status_code == 400


def test_update_and_delete_unknown_todo(client):
    headers = register_and_login(client, "ghost@x.com")
    assert client.put("/api/todos/nope", json={"title": "x"}, headers=headers).status_code == 404
    res = client.delete("/api/todos/nope", headers=headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Todo not found"


def test_delete_todo(client):
    headers = register_and_login(client, "del@x.com")
    todo = client.post("/api/todos", json=todo_payload(), headers=headers).json()

    res = client.delete(f"/api/todos/{todo['_id']}", headers=headers)
    assert res.status_code == 200
    assert res.json() == {"message": "Deleted successfully"}
    assert client.get("/api/todos/del@x.com", headers=headers).json() == []


def test_any_user_may_modify_any_todo_by_default(client):
    owner = register_and_login(client, "owner@x.com")
    other = register_and_login(client, "other@x.com")
    todo = client.post("/api/todos", json=todo_payload(), headers=owner).json()

    res = client.put(f"/api/todos/{todo['_id']}", json={"complete": True}, headers=other)
    assert res.status_code == 200
    assert client.delete(f"/api/todos/{todo['_id']}", headers=other).status_code == 200


def test_ownership_enforced_when_enabled(tmp_path):
    client = TestClient(create_app(make_settings(tmp_path, enforce_task_ownership=True)))
    owner = register_and_login(client, "owner@x.com")
    other = register_and_login(client, "other@x.com")
    todo = client.post("/api/todos", json=todo_payload(), headers=owner).json()

    assert client.put(f"/api/todos/{todo['_id']}", json={"complete": True}, headers=other).status_code == 403
    assert client.delete(f"/api/todos/{todo['_id']}", headers=other).status_code == 403
    res = client.post("/api/todos", json=todo_payload(userEmail="owner@x.com"), headers=other)
    assert res.status_code == 403

    assert client.put(f"/api/todos/{todo['_id']}", json={"complete": True}, headers=owner).status_code == 200
    assert client.delete(f"/api/todos/{todo['_id']}", headers=owner).status_code == 200


def test_list_all_todos_admin_only(client, admin_headers):
    alice = register_and_login(client, "alice@x.com")
    bob = register_and_login(client, "bob@x.com")
    client.post("/api/todos", json=todo_payload("a"), headers=alice)
    client.post("/api/todos", json=todo_payload("b"), headers=bob)

    res = client.get("/api/todos", headers=alice)
    assert res.status_code == 403

    res = client.get("/api/todos", headers=admin_headers)
    assert res.status_code == 200
    assert sorted(t["title"] for t in res.json()) == ["a", "b"]
