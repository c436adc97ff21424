from datetime import datetime
from pydantic import BaseModel, Field

from loom.models.enums import TaskPriority, TaskStatus, TaskType
from loom.schemas.common import PartialUpdate, WriteSchema, reject_null


class TaskCreate(WriteSchema):
    """Schema for creating a new task."""
    project_id: int
    title: str = Field(min_length=1)
    description: str | None = None
    task_type: TaskType = TaskType.GENERAL
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    external_link: str | None = None


class TaskUpdate(PartialUpdate):
    """
    Schema for updating a task.

    project_id is not accepted: a task never moves between projects.
    """
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    task_type: TaskType | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    external_link: str | None = None

    check_not_null = reject_null("title", "task_type", "status", "priority")


class TaskRead(BaseModel):
    """Schema for reading a task."""
    id: int
    project_id: int
    title: str
    description: str | None
    task_type: str
    status: str
    priority: str
    external_link: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskNoteCreate(WriteSchema):
    """Schema for adding a note to a task."""
    task_id: int
    note: str = Field(min_length=1)


class TaskNoteUpdate(PartialUpdate):
    """Schema for editing a note. The owning task cannot change."""
    note: str | None = Field(default=None, min_length=1)

    check_not_null = reject_null("note")


class TaskNoteRead(BaseModel):
    """Schema for reading a task note."""
    id: int
    task_id: int
    note: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
