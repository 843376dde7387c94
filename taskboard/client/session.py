"""
Client-side session: the token and identity obtained at login.

Lifecycle: restore() on start-up, save() after login, clear() on logout
or whenever the server answers 401.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from ..utils.logger import get_logger

logger = get_logger(__name__)


class Session(BaseModel):
    token: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class SessionStore:
    """Keeps the current session in memory, optionally mirrored to a JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self.current: Optional[Session] = None

    def restore(self) -> Optional[Session]:
        """Load a saved session; a missing or unreadable file yields None."""
        if self.path is None or not self.path.exists():
            self.current = None
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                self.current = Session(**json.load(f))
        except (json.JSONDecodeError, OSError, TypeError, ValidationError) as e:
            logger.warning("Discarding unreadable session file", path=str(self.path), error=str(e))
            self.clear()
        return self.current

    def save(self, session: Session) -> None:
        self.current = session
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(session.model_dump(), f)

    def clear(self) -> None:
        self.current = None
        if self.path is not None and self.path.exists():
            self.path.unlink()

    @property
    def token(self) -> Optional[str]:
        return self.current.token if self.current else None
