"""Task storage over the `todos` JSON collection."""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..models.account import normalize_email
from ..models.task import Task
from .document_store import Document, JsonCollection

TODOS_FILE = "todos.json"


class TaskStore:
    """Typed access to task documents."""

    def __init__(self, data_dir: Path):
        self.collection = JsonCollection(Path(data_dir) / TODOS_FILE)

    def list(self) -> List[Task]:
        return [Task(**doc) for doc in self.collection.all()]

    def list_by_owner(self, email: str) -> List[Task]:
        wanted = normalize_email(email)
        return [
            Task(**doc)
            for doc in self.collection.find(lambda doc: doc.get("user_email") == wanted)
        ]

    def get(self, task_id: str) -> Optional[Task]:
        doc = self.collection.get(task_id)
        return Task(**doc) if doc else None

    def insert(self, task: Task) -> Task:
        doc = task.model_dump(mode="json")
        doc["user_email"] = normalize_email(doc["user_email"])
        return Task(**self.collection.insert_one(doc))

    def update(self, task_id: str, changes: Dict[str, Any]) -> Optional[Task]:
        changes = dict(changes)
        if "user_email" in changes:
            changes["user_email"] = normalize_email(changes["user_email"])
        doc = self.collection.update_one(task_id, changes)
        return Task(**doc) if doc else None

    def delete(self, task_id: str) -> Optional[Task]:
        doc = self.collection.delete_one(task_id)
        return Task(**doc) if doc else None

    def delete_by_owner(self, email: str) -> int:
        wanted = normalize_email(email)
        return self.collection.delete_many(lambda doc: doc.get("user_email") == wanted)

    def rewrite(self, rewrite: Callable[[Document], Optional[Document]]) -> int:
        return self.collection.update_many(rewrite)
