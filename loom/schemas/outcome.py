from datetime import datetime
from pydantic import BaseModel, Field

from loom.models.enums import OutcomeStatus
from loom.schemas.common import PartialUpdate, WriteSchema, reject_null


class OutcomeCreate(WriteSchema):
    """Schema for creating an outcome."""
    project_id: int
    title: str = Field(min_length=1)
    description: str | None = None
    status: OutcomeStatus = OutcomeStatus.OPEN
    task_id: int | None = None


class OutcomeUpdate(PartialUpdate):
    """Schema for updating an outcome."""
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: OutcomeStatus | None = None

    check_not_null = reject_null("title", "status")


class OutcomeRead(BaseModel):
    """Schema for reading an outcome."""
    id: int
    project_id: int
    task_id: int | None
    title: str
    description: str | None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
