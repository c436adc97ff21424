from datetime import datetime
from sqlmodel import SQLModel, Field

from loom.models.enums import OutcomeStatus


class Outcome(SQLModel, table=True):
    """Outcome model - owned by a project, optionally tied to one of its tasks."""

    __tablename__ = "outcomes"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", ondelete="CASCADE", index=True)
    task_id: int | None = Field(
        default=None, foreign_key="tasks.id", ondelete="SET NULL", index=True
    )
    title: str
    description: str | None = Field(default=None)
    status: str = Field(default=OutcomeStatus.OPEN.value, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, index=True)
