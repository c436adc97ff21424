from datetime import datetime
from sqlmodel import SQLModel, Field

from loom.models.enums import ProjectStatus


class Project(SQLModel, table=True):
    """Project model - root of ownership for tasks and outcomes."""

    __tablename__ = "projects"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: str | None = Field(default=None)
    status: str = Field(default=ProjectStatus.ACTIVE.value, index=True)
    external_link: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, index=True)
