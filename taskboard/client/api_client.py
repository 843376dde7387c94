"""REST client for the taskboard API"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

from ..utils.exceptions import TaskboardError
from ..utils.logger import get_logger
from .session import Session, SessionStore

logger = get_logger(__name__)

Todo = Dict[str, Any]


class ApiError(TaskboardError):
    """Non-2xx answer from the API (status_code 0 for network failures)"""

    def __init__(self, message: str, status_code: int):
        super().__init__(message, status_code=status_code)


@dataclass
class ToggleResult:
    todos: List[Todo]
    error: Optional[ApiError] = None


class TaskboardClient:
    """
    Thin client over the REST API.

    `http` may be any object exposing requests-style
    request(method, url, json=, params=, headers=, timeout=); a
    requests.Session is created when omitted. No call is retried.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000/api",
        session_store: Optional[SessionStore] = None,
        http: Any = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.sessions = session_store or SessionStore()
        self.http = http or requests.Session()
        self.timeout = timeout

    # ----------------------------------------------------------- plumbing

    def _request(
        self,
        method: str,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        auth: bool = True,
    ) -> Any:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = {}
        if auth and self.sessions.token:
            headers["Authorization"] = f"Bearer {self.sessions.token}"

        logger.debug("Sending API request", method=method, endpoint=endpoint)
        try:
            response = self.http.request(
                method, url, json=json, params=params, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error("Request timeout", endpoint=endpoint, error=str(e))
            raise ApiError(f"Request timeout after {self.timeout} seconds", 0)
        except requests.exceptions.RequestException as e:
            logger.error("Request failed", endpoint=endpoint, error=str(e))
            raise ApiError(f"Request failed: {e}", 0)

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code == 401:
            # token missing, invalid or expired: drop the session
            self.sessions.clear()
        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            raise ApiError(message or f"HTTP {response.status_code}", response.status_code)
        return body

    # --------------------------------------------------------------- auth

    def register(self, email: str, password: str, role: Optional[str] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"email": email, "password": password}
        if role:
            payload["role"] = role
        return self._request("POST", "/register", json=payload, auth=False)

    def login(self, email: str, password: str) -> Session:
        body = self._request(
            "POST", "/login", json={"email": email, "password": password}, auth=False
        )
        session = Session(**body)
        self.sessions.save(session)
        return session

    def logout(self) -> None:
        self.sessions.clear()

    def restore_session(self) -> Optional[Session]:
        """Reload a saved session and confirm the server still accepts it."""
        session = self.sessions.restore()
        if session is None:
            return None
        try:
            self.me()
        except ApiError as e:
            if e.status_code != 401:
                raise
            return None
        return self.sessions.current

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/me")

    # -------------------------------------------------------------- todos

    def create_todo(self, fields: Dict[str, Any]) -> Todo:
        payload = dict(fields)
        if "userEmail" not in payload and self.sessions.current:
            payload["userEmail"] = self.sessions.current.email
        return self._request("POST", "/todos", json=payload)

    def list_my_todos(self) -> List[Todo]:
        if not self.sessions.current:
            raise ApiError("Not logged in", 401)
        return self.list_todos_for(self.sessions.current.email)

    def list_todos_for(self, email: str) -> List[Todo]:
        return self._request("GET", f"/todos/{email}")

    def list_all_todos(self) -> List[Todo]:
        return self._request("GET", "/todos")

    def update_todo(self, todo_id: str, changes: Dict[str, Any]) -> Todo:
        return self._request("PUT", f"/todos/{todo_id}", json=changes)

    def delete_todo(self, todo_id: str) -> None:
        self._request("DELETE", f"/todos/{todo_id}")

    def delete_todos(self, todo_ids: List[str]) -> List[str]:
        """Delete one by one; stops at the first failure. Returns deleted ids."""
        deleted = []
        for todo_id in todo_ids:
            self.delete_todo(todo_id)
            deleted.append(todo_id)
        return deleted

    def toggle_complete(
        self,
        todo: Todo,
        todos: List[Todo],
        on_optimistic: Optional[Callable[[List[Todo]], None]] = None,
    ) -> ToggleResult:
        """
        Flip `complete` locally, then persist it.

        The flipped list is handed to `on_optimistic` before the request is
        sent, so a caller can render it immediately. On failure the list is
        re-fetched from the server (kept as-is on 401, the session is gone).
        """
        new_value = not bool(todo.get("complete"))
        optimistic = [
            {**t, "complete": new_value} if t.get("_id") == todo.get("_id") else t
            for t in todos
        ]
        if on_optimistic is not None:
            on_optimistic(optimistic)
        try:
            self.update_todo(todo["_id"], {"complete": new_value})
        except ApiError as e:
            logger.warning("Toggle failed, reloading todos", todo_id=todo.get("_id"), error=e.message)
            if e.status_code == 401:
                return ToggleResult(todos=todos, error=e)
            return ToggleResult(todos=self.list_my_todos(), error=e)
        return ToggleResult(todos=optimistic)

    # -------------------------------------------------------------- admin

    def list_users(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/users")

    def get_user(self, email: str) -> Dict[str, Any]:
        return self._request("GET", "/getUser", params={"email": email})

    def update_user(
        self, user_id: str, email: Optional[str] = None, role: Optional[str] = None
    ) -> Dict[str, Any]:
        payload = {k: v for k, v in {"email": email, "role": role}.items() if v is not None}
        return self._request("PUT", f"/users/{user_id}", json=payload)

    def delete_user(self, user_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/users/{user_id}")

    def rename_email(
        self, old_email: str, new_email: str, new_role: Optional[str] = None
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"oldEmail": old_email, "newEmail": new_email}
        if new_role:
            payload["newRole"] = new_role
        return self._request("PUT", "/todos/updateEmail", json=payload)
