from datetime import datetime
from pydantic import BaseModel, Field

from loom.models.enums import GoalType
from loom.schemas.common import PartialUpdate, WriteSchema, reject_null


class GoalCreate(WriteSchema):
    """Schema for creating a goal."""
    title: str = Field(min_length=1)
    description: str | None = None
    goal_type: GoalType = GoalType.SHORT_TERM
    assignee: str | None = None
    project_id: int | None = None
    task_id: int | None = None


class GoalUpdate(PartialUpdate):
    """Schema for updating a goal."""
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    goal_type: GoalType | None = None
    assignee: str | None = None

    check_not_null = reject_null("title", "goal_type")


class GoalRead(BaseModel):
    """Schema for reading a goal."""
    id: int
    project_id: int | None
    task_id: int | None
    title: str
    description: str | None
    goal_type: str
    assignee: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
