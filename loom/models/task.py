from datetime import datetime
from sqlmodel import SQLModel, Field

from loom.models.enums import TaskPriority, TaskStatus, TaskType


class Task(SQLModel, table=True):
    """
    Task model.

    project_id is fixed at creation; deleting the project deletes the task.
    """

    __tablename__ = "tasks"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", ondelete="CASCADE", index=True)
    title: str
    description: str | None = Field(default=None)
    task_type: str = Field(default=TaskType.GENERAL.value, index=True)
    status: str = Field(default=TaskStatus.PENDING.value, index=True)
    priority: str = Field(default=TaskPriority.MEDIUM.value)
    external_link: str | None = Field(default=None)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, index=True)
