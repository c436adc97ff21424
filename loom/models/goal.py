from datetime import datetime
from sqlmodel import SQLModel, Field

from loom.models.enums import GoalType


class Goal(SQLModel, table=True):
    """
    Goal model.

    Same link semantics as Problem: project_id/task_id record the origin
    and are cleared on delete; GoalProjectLink rows record extra projects.
    """

    __tablename__ = "goals"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    project_id: int | None = Field(
        default=None, foreign_key="projects.id", ondelete="SET NULL", index=True
    )
    task_id: int | None = Field(
        default=None, foreign_key="tasks.id", ondelete="SET NULL", index=True
    )
    title: str
    description: str | None = Field(default=None)
    goal_type: str = Field(default=GoalType.SHORT_TERM.value, index=True)
    assignee: str | None = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, index=True)
