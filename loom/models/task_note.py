from datetime import datetime
from sqlmodel import SQLModel, Field


class TaskNote(SQLModel, table=True):
    """Free-text note attached to a task."""

    __tablename__ = "task_notes"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    task_id: int = Field(foreign_key="tasks.id", ondelete="CASCADE", index=True)
    note: str
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
