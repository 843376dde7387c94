"""Task (todo) data models"""

from datetime import date, datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from .account import utcnow

Priority = Literal["Low", "Normal", "High"]


class Task(BaseModel):
    """
    A to-do item. `user_email` is a denormalized copy of the owner's
    email and is the only link between a task and its account.
    """

    id: str = Field(default_factory=lambda: str(uuid4()), serialization_alias="_id")
    title: str
    description: str
    due_date: date = Field(serialization_alias="dueDate")
    priority: Priority
    category: str
    location: str
    reminder: str
    tag: str
    assign_to: str = Field(serialization_alias="assignTo")
    user_email: str = Field(serialization_alias="userEmail")
    complete: bool = False
    created_at: datetime = Field(default_factory=utcnow, serialization_alias="createdAt")
