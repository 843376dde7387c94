"""Account/task services against real stores in a temp data dir."""

from datetime import timedelta

import pytest

from conftest import utc_today
from taskboard.auth.service import Authenticator
from taskboard.services.account_service import AccountService
from taskboard.services.task_service import TaskService
from taskboard.stores.accounts import AccountStore
from taskboard.stores.tasks import TaskStore
from taskboard.utils.config import AuthSettings
from taskboard.utils.exceptions import (
    EmailConflict,
    NotFound,
    StoreError,
    ValidationFailure,
)


@pytest.fixture
def stores(tmp_path):
    return AccountStore(tmp_path), TaskStore(tmp_path)


@pytest.fixture
def auth(stores):
    return Authenticator(stores[0], AuthSettings(jwt_secret="s", bcrypt_rounds=4))


@pytest.fixture
def accounts_service(stores):
    return AccountService(*stores)


@pytest.fixture
def task_service(stores):
    return TaskService(stores[1])


def task_fields(**overrides):
    fields = {
        "title": "t",
        "description": "d",
        "due_date": utc_today() + timedelta(days=1),
        "priority": "Low",
        "category": "c",
        "location": "l",
        "reminder": "r",
        "tag": "g",
        "assign_to": "",
    }
    fields.update(overrides)
    return fields


def test_create_does_not_require_existing_account(task_service):
    task = task_service.create("Nobody@X.com ", task_fields())
    assert task.user_email == "nobody@x.com"
    assert [t.id for t in task_service.list_for_owner("nobody@x.com")] == [task.id]


def test_create_due_date_boundary(task_service):
    today = utc_today()
    assert task_service.create("a@x.com", task_fields(due_date=today), today=today)
    with pytest.raises(ValidationFailure):
        task_service.create(
            "a@x.com", task_fields(due_date=today - timedelta(days=1)), today=today
        )


def test_delete_account_removes_only_owned_tasks(auth, accounts_service, task_service):
    account = auth.register("e@x.com", "pw")
    for _ in range(3):
        task_service.create("e@x.com", task_fields())
    task_service.create("other@x.com", task_fields(assign_to="e@x.com"))

    assert accounts_service.delete_account(account.id) == 3
    assert task_service.list_for_owner("e@x.com") == []
    assert len(task_service.list_all()) == 1
    with pytest.raises(NotFound):
        accounts_service.get_by_email("e@x.com")


def test_delete_unknown_account(accounts_service):
    with pytest.raises(NotFound):
        accounts_service.delete_account("missing")


def test_rename_rewrites_owner_and_assignee(auth, accounts_service, task_service):
    auth.register("e1@x.com", "pw")
    owned = task_service.create("e1@x.com", task_fields())
    assigned = task_service.create("z@x.com", task_fields(assign_to=" E1@x.com"))
    untouched = task_service.create("z@x.com", task_fields(assign_to="someone"))

    result = accounts_service.rename_email_and_propagate("e1@x.com", "E2@x.com")

    assert result.updated_todos == 2
    assert result.account.email == "e2@x.com"
    assert task_service.get(owned.id).user_email == "e2@x.com"
    assert task_service.get(assigned.id).assign_to == "e2@x.com"
    assert task_service.get(assigned.id).user_email == "z@x.com"
    assert task_service.get(untouched.id).assign_to == "someone"
    remaining = [
        t for t in task_service.list_all() if "e1@x.com" in (t.user_email, t.assign_to)
    ]
    assert remaining == []


def test_rename_rejects_bad_input(auth, accounts_service):
    auth.register("a@x.com", "pw")
    auth.register("b@x.com", "pw")
    with pytest.raises(ValidationFailure):
        accounts_service.rename_email_and_propagate("a@x.com", " ")
    with pytest.raises(ValidationFailure):
        accounts_service.rename_email_and_propagate("a@x.com", "c@x.com", new_role="root")
    with pytest.raises(EmailConflict):
        accounts_service.rename_email_and_propagate("a@x.com", "b@x.com")
    with pytest.raises(NotFound):
        accounts_service.rename_email_and_propagate("zzz@x.com", "c@x.com")


def test_rename_partial_failure_leaves_account_moved(
    auth, accounts_service, task_service, stores, monkeypatch
):
    auth.register("p@x.com", "pw")
    task = task_service.create("p@x.com", task_fields())

    def broken_rewrite(rewrite):
        raise StoreError("Failed to write todos store")

    monkeypatch.setattr(stores[1], "rewrite", broken_rewrite)

    with pytest.raises(StoreError):
        accounts_service.rename_email_and_propagate("p@x.com", "q@x.com")

    # account moved first; tasks still on the old email
    assert stores[0].find_by_email("q@x.com") is not None
    assert task_service.get(task.id).user_email == "p@x.com"


def test_update_account_role_and_email(auth, accounts_service):
    account = auth.register("r@x.com", "pw")
    updated = accounts_service.update_account(account.id, role="admin")
    assert updated.role == "admin"
    updated = accounts_service.update_account(account.id, email="R2@x.com")
    assert updated.email == "r2@x.com"
    assert updated.role == "admin"
    with pytest.raises(ValidationFailure):
        accounts_service.update_account(account.id, role="owner")


def test_task_update_is_a_merge(task_service):
    task = task_service.create("m@x.com", task_fields(title="before"))
    updated = task_service.update(task.id, {"complete": True})
    assert updated.complete is True
    assert updated.title == "before"
    with pytest.raises(NotFound):
        task_service.update("missing", {"complete": True})
