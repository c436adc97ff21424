"""
Problem routes for the Loom API (read-only).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loom.database import get_session
from loom.models import LinkKind, Problem, ProblemStatus
from loom.schemas import ProblemRead, ProjectRead
from loom.services import integrity, problems

router = APIRouter()


@router.get("", response_model=list[ProblemRead])
async def list_problems(
    project_id: int | None = None,
    task_id: int | None = None,
    status: ProblemStatus | None = None,
    assignee: str | None = None,
    session: AsyncSession = Depends(get_session),
) -> list[Problem]:
    """List problems filtered by origin project, task, status and assignee."""
    return await problems.list_problems(
        session,
        project_id=project_id,
        task_id=task_id,
        status=status,
        assignee=assignee,
    )


@router.get("/{problem_id}", response_model=ProblemRead)
async def get_problem(
    problem_id: int,
    session: AsyncSession = Depends(get_session),
) -> Problem:
    """Get a problem by ID."""
    return await problems.get_problem(session, problem_id)


@router.get("/{problem_id}/projects", response_model=list[ProjectRead])
async def get_problem_projects(
    problem_id: int,
    session: AsyncSession = Depends(get_session),
):
    """Additional projects the problem is linked to."""
    return await integrity.projects_for(session, LinkKind.PROBLEM, problem_id)
