"""
Todo routes. All require a valid bearer token; listing every todo is
admin-only and listing by email is limited to that email's holder or an
admin.

Prefix: /api/todos
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from taskboard.app import TaskboardApp
from taskboard.auth import policy
from taskboard.models.account import Account
from .auth_middleware import get_current_account, get_taskboard, require_admin
from .schemas import TaskCreate, TaskUpdate
from .serializers import task_to_json, tasks_to_json

router = APIRouter(prefix="/api/todos", tags=["todos"])


@router.post("")
def create_todo(
    body: TaskCreate,
    current: Account = Depends(get_current_account),
    taskboard: TaskboardApp = Depends(get_taskboard),
) -> Dict[str, Any]:
    """Create a todo. The owner defaults to the caller when userEmail is omitted."""
    fields = body.model_dump(exclude={"user_email"})
    task = taskboard.task_service.create(
        body.user_email or current.email, fields, caller=current
    )
    return task_to_json(task)


@router.get("")
def list_all_todos(
    _admin: Account = Depends(require_admin),
    taskboard: TaskboardApp = Depends(get_taskboard),
) -> List[Dict[str, Any]]:
    return tasks_to_json(taskboard.task_service.list_all())


@router.get("/{user_email}")
def list_todos_for_email(
    user_email: str,
    current: Account = Depends(get_current_account),
    taskboard: TaskboardApp = Depends(get_taskboard),
) -> List[Dict[str, Any]]:
    policy.require_self_or_admin(current, user_email)
    return tasks_to_json(taskboard.task_service.list_for_owner(user_email))


@router.put("/{task_id}")
def update_todo(
    task_id: str,
    body: TaskUpdate,
    current: Account = Depends(get_current_account),
    taskboard: TaskboardApp = Depends(get_taskboard),
) -> Dict[str, Any]:
    changes = body.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    task = taskboard.task_service.update(task_id, changes, caller=current)
    return task_to_json(task)


@router.delete("/{task_id}")
def delete_todo(
    task_id: str,
    current: Account = Depends(get_current_account),
    taskboard: TaskboardApp = Depends(get_taskboard),
) -> Dict[str, str]:
    taskboard.task_service.delete(task_id, caller=current)
    return {"message": "Deleted successfully"}
