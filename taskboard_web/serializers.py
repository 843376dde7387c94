"""Wire representations (field names the browser client expects)."""

from typing import Any, Dict, Iterable, List

from taskboard.models.account import Account
from taskboard.models.task import Task


def account_to_json(account: Account) -> Dict[str, Any]:
    return account.to_public().model_dump(mode="json", by_alias=True)


def accounts_to_json(accounts: Iterable[Account]) -> List[Dict[str, Any]]:
    return [account_to_json(a) for a in accounts]


def task_to_json(task: Task) -> Dict[str, Any]:
    return task.model_dump(mode="json", by_alias=True)


def tasks_to_json(tasks: Iterable[Task]) -> List[Dict[str, Any]]:
    return [task_to_json(t) for t in tasks]
