"""
Access guard as FastAPI dependencies.

get_current_account():
- Reads the bearer token from the Authorization header
- Verifies signature and expiry, then resolves the live account
- Raises 401 when any of that fails

require_admin() additionally raises 403 for non-admin callers.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from taskboard.app import TaskboardApp
from taskboard.auth import policy
from taskboard.models.account import Account
from taskboard.utils.exceptions import AuthenticationFailure
from taskboard.utils.logger import get_logger

logger = get_logger(__name__)


def get_taskboard(request: Request) -> TaskboardApp:
    return request.app.state.taskboard


def _extract_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_account(
    request: Request, taskboard: TaskboardApp = Depends(get_taskboard)
) -> Account:
    """
    Dependency for protected routes.

    Raises 401 if the token is missing, invalid, expired, or names an
    account that no longer exists.
    """
    token = _extract_token(request)
    if not token:
        raise _unauthorized("Not authenticated")
    try:
        return taskboard.authenticator.resolve(token)
    except AuthenticationFailure as e:
        logger.warning("Rejected token", reason=e.message, path=request.url.path)
        raise _unauthorized(e.message)


def require_admin(current: Account = Depends(get_current_account)) -> Account:
    """Dependency for admin-only routes (403 for everyone else)."""
    policy.require_admin(current)
    return current
