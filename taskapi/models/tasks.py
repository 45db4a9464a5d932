# taskapi/models/tasks.py

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from taskapi.models.users import UserSummary, UtcDatetime

TaskStatus = Literal["To Do", "In Progress", "Completed"]
TaskPriority = Literal["Low", "Medium", "High"]


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: TaskStatus = "To Do"
    priority: TaskPriority = "Medium"
    assigned_user: Optional[UUID] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_user: Optional[UUID] = None

    @model_validator(mode="after")
    def _not_empty(self):
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        for name in ("title", "status", "priority"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class TaskOut(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[UtcDatetime] = None
    status: str
    priority: str
    assigned_user: Optional[UserSummary] = None
    creator_id: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class PublicTaskOut(BaseModel):
    """Task as shown to anonymous callers: no assignee or creator details."""

    id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[UtcDatetime] = None
    status: str
    priority: str
    assigned_user_id: Optional[str] = None
    created_at: UtcDatetime


class TaskListResponse(BaseModel):
    tasks: List[TaskOut]
    total: int
    total_pages: int
    current_page: int
    limit: int


class PublicTaskListResponse(BaseModel):
    tasks: List[PublicTaskOut]
    total_pages: int
