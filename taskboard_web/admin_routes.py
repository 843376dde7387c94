"""
Admin-only account management.

Prefix: /api. The rename route lives under /api/todos and must be
registered before the todo router so that `updateEmail` is not captured
by PUT /api/todos/{task_id}.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from taskboard.app import TaskboardApp
from taskboard.models.account import Account
from .auth_middleware import get_taskboard, require_admin
from .schemas import RenameEmailRequest, UserUpdate
from .serializers import account_to_json, accounts_to_json

router = APIRouter(prefix="/api", tags=["admin"])


@router.get("/users")
def list_users(
    _admin: Account = Depends(require_admin),
    taskboard: TaskboardApp = Depends(get_taskboard),
) -> List[Dict[str, Any]]:
    return accounts_to_json(taskboard.account_service.list_accounts())


@router.get("/getUser")
def get_user(
    email: Optional[str] = Query(default=None),
    _admin: Account = Depends(require_admin),
    taskboard: TaskboardApp = Depends(get_taskboard),
) -> Dict[str, Any]:
    """Look up one account by email (?email=...); 400 if the parameter is missing."""
    return account_to_json(taskboard.account_service.get_by_email(email or ""))


@router.put("/users/{user_id}")
def update_user(
    user_id: str,
    body: UserUpdate,
    _admin: Account = Depends(require_admin),
    taskboard: TaskboardApp = Depends(get_taskboard),
) -> Dict[str, Any]:
    """
    Update email and/or role. Todos keep the old email; use
    PUT /api/todos/updateEmail to move them along with the account.
    """
    account = taskboard.account_service.update_account(
        user_id, email=body.email, role=body.role
    )
    return account_to_json(account)


@router.delete("/users/{user_id}")
def delete_user(
    user_id: str,
    _admin: Account = Depends(require_admin),
    taskboard: TaskboardApp = Depends(get_taskboard),
) -> Dict[str, Any]:
    deleted = taskboard.account_service.delete_account(user_id)
    return {
        "message": "User and their todos deleted successfully",
        "deletedTodos": deleted,
    }


@router.put("/todos/updateEmail")
def rename_email(
    body: RenameEmailRequest,
    _admin: Account = Depends(require_admin),
    taskboard: TaskboardApp = Depends(get_taskboard),
) -> Dict[str, Any]:
    """
    Move an account to a new email and repoint its todos.

    Response:
        {"message": "...", "updatedTodos": <int>, "updatedUser": {...}}
    """
    result = taskboard.account_service.rename_email_and_propagate(
        body.old_email, body.new_email, body.new_role
    )
    return {
        "message": "Email (and role if provided) updated successfully",
        "updatedTodos": result.updated_todos,
        "updatedUser": account_to_json(result.account),
    }
