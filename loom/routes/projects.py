"""
Project routes for the Loom API (read-only).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loom.database import get_session
from loom.models import LinkKind, Project, ProjectStatus
from loom.schemas import GoalRead, ProblemRead, ProjectRead
from loom.services import integrity, projects

router = APIRouter()


@router.get("", response_model=list[ProjectRead])
async def list_projects(
    status: ProjectStatus | None = None,
    session: AsyncSession = Depends(get_session),
) -> list[Project]:
    """List projects, most recently updated first."""
    return await projects.list_projects(session, status=status)


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: int,
    session: AsyncSession = Depends(get_session),
) -> Project:
    """Get a project by ID."""
    return await projects.get_project(session, project_id)


@router.get("/{project_id}/goals", response_model=list[GoalRead])
async def get_project_goals(
    project_id: int,
    session: AsyncSession = Depends(get_session),
):
    """Goals linked to the project through the junction table."""
    return await integrity.children_for(session, project_id, LinkKind.GOAL)


@router.get("/{project_id}/problems", response_model=list[ProblemRead])
async def get_project_problems(
    project_id: int,
    session: AsyncSession = Depends(get_session),
):
    """Problems linked to the project through the junction table."""
    return await integrity.children_for(session, project_id, LinkKind.PROBLEM)
