"""
Public authentication routes plus the caller's own profile.

Prefix: /api
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from taskboard.app import TaskboardApp
from taskboard.models.account import Account
from .auth_middleware import get_current_account, get_taskboard
from .schemas import LoginRequest, RegisterRequest
from .serializers import account_to_json

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register")
def register(
    body: RegisterRequest, taskboard: TaskboardApp = Depends(get_taskboard)
) -> Dict[str, Any]:
    """
    Register a new account.

    Request:
        {"email": "...", "password": "...", "role": "user" | "admin" (optional)}

    Response:
        {"message": "Registered successfully"}
    """
    taskboard.authenticator.register(body.email, body.password, body.role)
    return {"message": "Registered successfully"}


@router.post("/login")
def login(
    body: LoginRequest, taskboard: TaskboardApp = Depends(get_taskboard)
) -> Dict[str, Any]:
    """
    Exchange credentials for a bearer token valid for one hour.

    Response:
        {"token": "<jwt>", "email": "...", "role": "user" | "admin"}
    """
    result = taskboard.authenticator.login(body.email, body.password)
    return {"token": result.token, "email": result.email, "role": result.role}


@router.get("/me")
def me(current: Account = Depends(get_current_account)) -> Dict[str, Any]:
    """Return the account behind the presented token."""
    return account_to_json(current)
