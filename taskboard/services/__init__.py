from .account_service import AccountService, RenameResult
from .task_service import TaskService

__all__ = ["AccountService", "RenameResult", "TaskService"]
