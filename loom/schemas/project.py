from datetime import datetime
from pydantic import BaseModel, Field

from loom.models.enums import ProjectStatus
from loom.schemas.common import PartialUpdate, WriteSchema, reject_null


class ProjectCreate(WriteSchema):
    """Schema for creating a new project."""
    name: str = Field(min_length=1)
    description: str | None = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    external_link: str | None = None


class ProjectUpdate(PartialUpdate):
    """Schema for updating a project."""
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: ProjectStatus | None = None
    external_link: str | None = None

    check_not_null = reject_null("name", "status")


class ProjectRead(BaseModel):
    """Schema for reading a project."""
    id: int
    name: str
    description: str | None
    status: str
    external_link: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
