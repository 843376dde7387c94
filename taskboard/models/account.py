"""Account data models for authentication and authorization"""

from datetime import datetime, timezone
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

Role = Literal["user", "admin"]
ROLES = ("user", "admin")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    """Canonical form used for every stored email and every comparison"""
    return (email or "").strip().lower()


class Account(BaseModel):
    """Stored account record. The password hash never leaves the service layer."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    email: str
    password_hash: str
    role: Role = "user"
    created_at: datetime = Field(default_factory=utcnow)

    def to_public(self) -> "AccountPublic":
        return AccountPublic(
            id=self.id,
            email=self.email,
            role=self.role,
            created_at=self.created_at,
        )


class AccountPublic(BaseModel):
    """Account projection returned by every read (password excluded)"""

    id: str = Field(serialization_alias="_id")
    email: str
    role: Role
    created_at: datetime = Field(serialization_alias="createdAt")
