"""
Project store operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from loom.logging_config import get_logger
from loom.models import Project, ProjectStatus
from loom.schemas import ProjectCreate, ProjectUpdate
from loom.services.common import apply_changes, enum_value, get_or_404
from loom.services.integrity import cascade_project_delete

logger = get_logger(__name__)


async def create_project(session: AsyncSession, data: ProjectCreate) -> Project:
    """Create a new project."""
    project = Project(**data.model_dump())
    session.add(project)
    await session.flush()
    await session.refresh(project)

    logger.info(f"Created project: id={project.id} name='{project.name}'")

    return project


async def get_project(session: AsyncSession, project_id: int) -> Project:
    """Get a project by ID."""
    return await get_or_404(session, Project, project_id, "Project")


async def list_projects(
    session: AsyncSession,
    status: ProjectStatus | None = None,
) -> list[Project]:
    """List projects, most recently updated first."""
    query = select(Project)
    if status is not None:
        query = query.where(Project.status == enum_value(ProjectStatus, status, "status"))
    query = query.order_by(Project.updated_at.desc(), Project.id.desc())

    result = await session.execute(query)
    projects = list(result.scalars().all())

    logger.debug(f"Listed {len(projects)} projects")

    return projects


async def update_project(session: AsyncSession, project_id: int, data: ProjectUpdate) -> Project:
    """Apply a partial update to a project."""
    project = await get_project(session, project_id)

    update_data = data.changes()
    logger.info(f"Updating project {project_id}: {update_data}")

    apply_changes(project, update_data)
    await session.flush()
    await session.refresh(project)
    return project


async def delete_project(session: AsyncSession, project_id: int) -> None:
    """
    Delete a project.

    Its tasks and outcomes go with it; problems and goals are kept
    but lose their project link.
    """
    project = await get_project(session, project_id)

    logger.info(f"Deleting project {project_id}: '{project.name}'")

    await cascade_project_delete(session, project)
