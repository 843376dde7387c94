"""Client-side filtering and pagination of todo and user lists (wire-format dicts)."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal

from ..models.account import normalize_email

Todo = Dict[str, Any]

PER_PAGE = 4

TEXT_FILTERS = {
    "title": "title",
    "location": "location",
    "assign_to": "assignTo",
    "tag": "tag",
    "category": "category",
    "priority": "priority",
    "user_email": "userEmail",
}


@dataclass
class TodoFilters:
    status: Literal["all", "complete", "pending"] = "all"
    title: str = ""
    location: str = ""
    assign_to: str = ""
    tag: str = ""
    category: str = ""
    priority: str = ""
    user_email: str = ""

    def matches(self, todo: Todo) -> bool:
        complete = bool(todo.get("complete"))
        if self.status == "complete" and not complete:
            return False
        if self.status == "pending" and complete:
            return False
        for attr, key in TEXT_FILTERS.items():
            needle = getattr(self, attr).lower()
            if needle and needle not in str(todo.get(key) or "").lower():
                return False
        return True


def filter_todos(todos: List[Todo], filters: TodoFilters) -> List[Todo]:
    return [todo for todo in todos if filters.matches(todo)]


@dataclass
class Page:
    items: List[Todo] = field(default_factory=list)
    page: int = 1
    pages: int = 1
    total: int = 0


def paginate(items: List[Todo], page: int = 1, per_page: int = PER_PAGE) -> Page:
    """Slice one page; `page` is clamped into [1, pages]."""
    if per_page <= 0:
        raise ValueError("per_page must be positive")
    total = len(items)
    pages = max(1, math.ceil(total / per_page))
    page = min(max(1, page), pages)
    start = (page - 1) * per_page
    return Page(items=items[start:start + per_page], page=page, pages=pages, total=total)


def count_todos_for_email(todos: List[Todo], email: str) -> int:
    """Todos owned by `email`, plus ownerless ones assigned to it."""
    wanted = normalize_email(email)
    if not wanted:
        return 0
    count = 0
    for todo in todos:
        owner = normalize_email(todo.get("userEmail") or "")
        assignee = normalize_email(todo.get("assignTo") or "")
        if owner == wanted or (not owner and assignee == wanted):
            count += 1
    return count


def filter_users(users: List[Dict[str, Any]], email: str = "") -> List[Dict[str, Any]]:
    """Admin user list narrowed to emails containing `email` (case-insensitive)."""
    needle = email.strip().lower()
    if not needle:
        return list(users)
    return [user for user in users if needle in str(user.get("email") or "").lower()]
