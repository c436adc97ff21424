from datetime import datetime
from sqlmodel import SQLModel, Field

from loom.models.enums import ProblemStatus


class Problem(SQLModel, table=True):
    """
    Problem model.

    project_id and task_id are the origin links and are cleared (not
    cascaded) when their target is deleted. Additional projects are
    linked through ProblemProjectLink.
    """

    __tablename__ = "problems"
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
    status: str = Field(default=ProblemStatus.OPEN.value, index=True)
    assignee: str | None = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, index=True)
