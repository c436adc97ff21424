"""
Goal routes for the Loom API (read-only).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loom.database import get_session
from loom.models import Goal, GoalType, LinkKind
from loom.schemas import GoalRead, ProjectRead
from loom.services import goals, integrity

router = APIRouter()


@router.get("", response_model=list[GoalRead])
async def list_goals(
    project_id: int | None = None,
    task_id: int | None = None,
    goal_type: GoalType | None = None,
    assignee: str | None = None,
    session: AsyncSession = Depends(get_session),
) -> list[Goal]:
    """List goals filtered by origin project, task, type and assignee."""
    return await goals.list_goals(
        session,
        project_id=project_id,
        task_id=task_id,
        goal_type=goal_type,
        assignee=assignee,
    )


@router.get("/{goal_id}", response_model=GoalRead)
async def get_goal(
    goal_id: int,
    session: AsyncSession = Depends(get_session),
) -> Goal:
    """Get a goal by ID."""
    return await goals.get_goal(session, goal_id)


@router.get("/{goal_id}/projects", response_model=list[ProjectRead])
async def get_goal_projects(
    goal_id: int,
    session: AsyncSession = Depends(get_session),
):
    """Additional projects the goal is linked to."""
    return await integrity.projects_for(session, LinkKind.GOAL, goal_id)
