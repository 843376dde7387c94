"""Role and ownership checks shared by the HTTP guard and the services."""

from ..models.account import Account, normalize_email
from ..models.task import Task
from ..utils.exceptions import AuthorizationFailure


def is_admin(account: Account) -> bool:
    return account.role == "admin"


def require_admin(account: Account) -> None:
    if not is_admin(account):
        raise AuthorizationFailure("Access denied: Admins only")


def require_self_or_admin(account: Account, email: str) -> None:
    """Caller must be an admin or the holder of `email`."""
    if is_admin(account):
        return
    if normalize_email(account.email) != normalize_email(email):
        raise AuthorizationFailure("Not allowed")


def require_owner_or_admin(account: Account, task: Task) -> None:
    require_self_or_admin(account, task.user_email)
