"""Request schemas validated at the HTTP boundary."""

from __future__ import annotations

from datetime import date
from typing import Annotated, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from taskboard.models.account import Role
from taskboard.models.task import Priority

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class RegisterRequest(BaseModel):
    email: EmailStr
    password: NonEmptyStr
    role: Optional[Role] = None


class LoginRequest(BaseModel):
    # plain str: an unknown or malformed email is just invalid credentials
    email: str
    password: str


class TaskCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: NonEmptyStr
    description: NonEmptyStr
    due_date: date = Field(validation_alias="dueDate")
    priority: Priority
    category: NonEmptyStr
    location: NonEmptyStr
    reminder: NonEmptyStr
    tag: NonEmptyStr
    assign_to: str = Field(default="", validation_alias="assignTo")
    user_email: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("userEmail", "ownerEmail")
    )
    complete: bool = False


class TaskUpdate(BaseModel):
    """
    Partial or full update; omitted or null fields are left unchanged.

    A task as returned by the API may be sent back whole: its server-owned
    keys (_id, createdAt, __v) are accepted and dropped.
    """

    model_config = ConfigDict(extra="forbid")

    id: Optional[str] = Field(default=None, validation_alias="_id", exclude=True)
    created_at: Optional[str] = Field(default=None, validation_alias="createdAt", exclude=True)
    version: Optional[int] = Field(default=None, validation_alias="__v", exclude=True)

    title: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    due_date: Optional[date] = Field(default=None, validation_alias="dueDate")
    priority: Optional[Priority] = None
    category: Optional[NonEmptyStr] = None
    location: Optional[NonEmptyStr] = None
    reminder: Optional[NonEmptyStr] = None
    tag: Optional[NonEmptyStr] = None
    assign_to: Optional[str] = Field(default=None, validation_alias="assignTo")
    user_email: Optional[NonEmptyStr] = Field(
        default=None, validation_alias=AliasChoices("userEmail", "ownerEmail")
    )
    complete: Optional[bool] = None


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    role: Optional[Role] = None


class RenameEmailRequest(BaseModel):
    old_email: NonEmptyStr = Field(validation_alias="oldEmail")
    new_email: EmailStr = Field(validation_alias="newEmail")
    new_role: Optional[Role] = Field(default=None, validation_alias="newRole")
