from .api_client import ApiError, TaskboardClient, ToggleResult
from .session import Session, SessionStore
from .views import (
    Page,
    TodoFilters,
    count_todos_for_email,
    filter_todos,
    filter_users,
    paginate,
)

__all__ = [
    "ApiError",
    "Page",
    "Session",
    "SessionStore",
    "TaskboardClient",
    "TodoFilters",
    "ToggleResult",
    "count_todos_for_email",
    "filter_todos",
    "filter_users",
    "paginate",
]
