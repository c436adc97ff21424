from datetime import datetime
from sqlmodel import SQLModel, Field


class GoalProjectLink(SQLModel, table=True):
    """
    Junction row linking a goal to an additional project.

    Removed when either side is deleted.
    """

    __tablename__ = "goal_projects"

    # Composite primary key
    goal_id: int = Field(foreign_key="goals.id", ondelete="CASCADE", primary_key=True)
    project_id: int = Field(
        foreign_key="projects.id", ondelete="CASCADE", primary_key=True, index=True
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)


class ProblemProjectLink(SQLModel, table=True):
    """Junction row linking a problem to an additional project."""

    __tablename__ = "problem_projects"

    problem_id: int = Field(foreign_key="problems.id", ondelete="CASCADE", primary_key=True)
    project_id: int = Field(
        foreign_key="projects.id", ondelete="CASCADE", primary_key=True, index=True
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
