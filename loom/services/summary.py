"""
Active work summary: one call instead of several list calls.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from loom.models import (
    Outcome,
    OutcomeStatus,
    Problem,
    ProblemStatus,
    Project,
    ProjectStatus,
    Task,
    TaskStatus,
)
from loom.schemas import ActiveWorkSummary


async def _in_status(session: AsyncSession, model, statuses: list[str]) -> list:
    query = (
        select(model)
        .where(model.status.in_(statuses))
        .order_by(model.updated_at.desc(), model.id.desc())
    )
    result = await session.execute(query)
    return list(result.scalars().all())


async def get_active_work_summary(session: AsyncSession) -> ActiveWorkSummary:
    """Active projects plus everything pending, open or in progress."""
    projects = await _in_status(session, Project, [ProjectStatus.ACTIVE.value])
    tasks = await _in_status(
        session, Task, [TaskStatus.PENDING.value, TaskStatus.IN_PROGRESS.value]
    )
    problems = await _in_status(
        session, Problem, [ProblemStatus.OPEN.value, ProblemStatus.IN_PROGRESS.value]
    )
    outcomes = await _in_status(
        session, Outcome, [OutcomeStatus.OPEN.value, OutcomeStatus.IN_PROGRESS.value]
    )

    return ActiveWorkSummary.model_validate({
        "projects": projects,
        "tasks": tasks,
        "problems": problems,
        "outcomes": outcomes,
    }, from_attributes=True)
