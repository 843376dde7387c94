from .accounts import AccountStore
from .document_store import DuplicateKeyError, JsonCollection
from .tasks import TaskStore

__all__ = ["AccountStore", "DuplicateKeyError", "JsonCollection", "TaskStore"]
