"""
Task service: CRUD over the task store, scoped by ownership and role.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from ..auth.policy import require_owner_or_admin, require_self_or_admin
from ..models.account import Account, normalize_email
from ..models.task import Task
from ..stores.tasks import TaskStore
from ..utils.exceptions import NotFound, ValidationFailure
from ..utils.logger import get_logger

logger = get_logger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class TaskService:
    """
    With `enforce_ownership` off (the default), any authenticated caller may
    update or delete any task by id and may create tasks for any email.
    With it on, those operations require the owner or an admin.
    """

    def __init__(self, tasks: TaskStore, enforce_ownership: bool = False):
        self.tasks = tasks
        self.enforce_ownership = enforce_ownership

    def create(
        self,
        owner_email: str,
        fields: Dict[str, Any],
        caller: Optional[Account] = None,
        today: Optional[date] = None,
    ) -> Task:
        """
        Persist a new task for `owner_email`.

        The owner is not checked against existing accounts. The due date
        must not be before today (UTC).
        """
        owner = normalize_email(owner_email)
        if not owner:
            raise ValidationFailure("Owner email is required")
        if self.enforce_ownership and caller is not None:
            require_self_or_admin(caller, owner)

        due_date = fields.get("due_date")
        if due_date is None:
            raise ValidationFailure("Due date is required")
        if due_date < (today or utc_today()):
            raise ValidationFailure("Due date cannot be in the past")

        task = Task(**{**fields, "user_email": owner})
        task = self.tasks.insert(task)
        logger.info("Task created", task_id=task.id, owner=owner)
        return task

    def list_for_owner(self, email: str) -> List[Task]:
        return self.tasks.list_by_owner(email)

    def list_all(self) -> List[Task]:
        return self.tasks.list()

    def get(self, task_id: str) -> Task:
        task = self.tasks.get(task_id)
        if task is None:
            raise NotFound("Todo not found")
        return task

    def update(
        self, task_id: str, changes: Dict[str, Any], caller: Optional[Account] = None
    ) -> Task:
        """
        Merge `changes` into the stored task. Business rules from creation
        (e.g. due date not in the past) are not re-checked.
        """
        if self.enforce_ownership and caller is not None:
            require_owner_or_admin(caller, self.get(task_id))
        task = self.tasks.update(task_id, changes)
        if task is None:
            raise NotFound("Todo not found")
        logger.info("Task updated", task_id=task_id, fields=sorted(changes))
        return task

    def delete(self, task_id: str, caller: Optional[Account] = None) -> Task:
        if self.enforce_ownership and caller is not None:
            require_owner_or_admin(caller, self.get(task_id))
        task = self.tasks.delete(task_id)
        if task is None:
            raise NotFound("Todo not found")
        logger.info("Task deleted", task_id=task_id)
        return task
