from datetime import datetime
from pydantic import BaseModel, Field

from loom.models.enums import ProblemStatus
from loom.schemas.common import PartialUpdate, WriteSchema, reject_null


class ProblemCreate(WriteSchema):
    """
    Schema for creating a problem.

    Both links are optional. When only task_id is given the project is
    taken from the task.
    """
    title: str = Field(min_length=1)
    description: str | None = None
    status: ProblemStatus = ProblemStatus.OPEN
    assignee: str | None = None
    project_id: int | None = None
    task_id: int | None = None


class ProblemUpdate(PartialUpdate):
    """Schema for updating a problem. Links are changed via link/unlink."""
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: ProblemStatus | None = None
    assignee: str | None = None

    check_not_null = reject_null("title", "status")


class ProblemRead(BaseModel):
    """Schema for reading a problem."""
    id: int
    project_id: int | None
    task_id: int | None
    title: str
    description: str | None
    status: str
    assignee: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
