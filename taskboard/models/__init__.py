from .account import Account, AccountPublic, Role, ROLES, normalize_email
from .task import Priority, Task

__all__ = [
    "Account",
    "AccountPublic",
    "Priority",
    "Role",
    "ROLES",
    "Task",
    "normalize_email",
]
